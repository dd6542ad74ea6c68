"""Registry of the iteration formulas ``z' = f(z, c)``.

Every formula starts from the complex square ``z^2 = (re^2 - im^2, 2 re im)``
and rectifies part of it before adding ``c``. Formulas are numbered 1 to 4,
the numbering used by the CLI and by callers of :func:`evaluate`.

Each formula has a scalar form on Python ``complex`` values and a vector form
on numpy arrays of real and imaginary parts. Both forms perform the same
float64 operations in the same order, so they agree bit for bit.
"""

from typing import Callable, NamedTuple, Tuple

import numpy as np

ScalarFormula = Callable[[complex, complex], complex]
VectorFormula = Callable[
    [np.ndarray, np.ndarray, np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]
]


class Formula(NamedTuple):
    number: int
    name: str
    expression: str
    func: ScalarFormula
    vector_func: VectorFormula


# =============================================================================
# Scalar forms
# =============================================================================

def abs_real(z: complex, c: complex) -> complex:
    re2 = z.real * z.real - z.imag * z.imag
    im2 = 2 * z.real * z.imag
    return complex(abs(re2) + c.real, im2 + c.imag)


def abs_both(z: complex, c: complex) -> complex:
    re2 = z.real * z.real - z.imag * z.imag
    im2 = 2 * z.real * z.imag
    return complex(abs(re2) + c.real, abs(im2) + c.imag)


def conjugate(z: complex, c: complex) -> complex:
    re2 = z.real * z.real - z.imag * z.imag
    im2 = 2 * z.real * z.imag
    return complex(re2 + c.real, -im2 + c.imag)


def signed_square(z: complex, c: complex) -> complex:
    # re|re| keeps the sign of re, unlike re^2
    re_part = z.real * abs(z.real) + z.imag * z.imag
    im_part = 2 * z.real * z.imag
    return complex(abs(re_part) + c.real, im_part + c.imag)


# =============================================================================
# Vector forms (re, im, c_re, c_im) -> (re', im')
# =============================================================================

def abs_real_vec(re, im, c_re, c_im):
    re2 = re * re - im * im
    im2 = 2 * re * im
    return np.abs(re2) + c_re, im2 + c_im


def abs_both_vec(re, im, c_re, c_im):
    re2 = re * re - im * im
    im2 = 2 * re * im
    return np.abs(re2) + c_re, np.abs(im2) + c_im


def conjugate_vec(re, im, c_re, c_im):
    re2 = re * re - im * im
    im2 = 2 * re * im
    return re2 + c_re, -im2 + c_im


def signed_square_vec(re, im, c_re, c_im):
    re_part = re * np.abs(re) + im * im
    im_part = 2 * re * im
    return np.abs(re_part) + c_re, im_part + c_im


FORMULAS: Tuple[Formula, ...] = (
    Formula(1, "abs_real", "abs(re(z^2)) + i * im(z^2) + c",
            abs_real, abs_real_vec),
    Formula(2, "abs_both", "abs(re(z^2)) + i * abs(im(z^2)) + c",
            abs_both, abs_both_vec),
    Formula(3, "conjugate", "re(z^2) - i * im(z^2) + c",
            conjugate, conjugate_vec),
    Formula(4, "signed_square", "abs(Re(z) * abs(Re(z)) + Im(z)^2) + 2i * Re(z) * Im(z) + c",
            signed_square, signed_square_vec),
)


def norm_sq(z: complex) -> float:
    """Squared magnitude. Overflows to inf instead of raising like abs()."""
    return z.real * z.real + z.imag * z.imag


def get_formula(number: int) -> Formula:
    """Look up a formula by its 1-based number.

    Raises:
        ValueError: If ``number`` is not an integer in 1..len(FORMULAS).
    """
    if (
        isinstance(number, bool)
        or not isinstance(number, (int, np.integer))
        or not 1 <= number <= len(FORMULAS)
    ):
        raise ValueError(
            f"Unknown formula: {number!r} (expected 1-{len(FORMULAS)})"
        )
    return FORMULAS[number - 1]


def evaluate(number: int, z: complex, c: complex) -> complex:
    """Apply formula ``number`` once to ``z`` with constant ``c``."""
    return get_formula(number).func(z, c)
