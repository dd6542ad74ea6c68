"""Turn escape counts into a grayscale image."""

import numpy as np
from PIL import Image

from .field import FractalField


def intensity(field: FractalField) -> np.ndarray:
    """Map counts to 0-255 as ``255 * count // max_iter``; in-set cells are white."""
    return (field.counts * 255 // field.max_iter).astype(np.uint8)


def to_image(field: FractalField) -> Image.Image:
    return Image.fromarray(intensity(field))


def save_field(field: FractalField, img_name: str):
    """Write the field to ``img_name``; the format follows the extension."""
    to_image(field).save(img_name)
