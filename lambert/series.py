"""Expansions of W0 about the branch point x = -1/e, w = -1.

Both work in terms of q = x + 1/e, the distance above the branch point.
"""
from math import sqrt

from lambert.numba_opt import jit_hardcore
from lambert.stuff import E, EPS, ONE_OVER_E, SERIES_THRESHOLD

# Puiseux coefficients of W0 in powers of sqrt(q), lowest degree first.
# Do not round or re-derive these.
SERIES_COEFFS = (
    -1.0,
    2.331643981597124203363536062168,
    -1.812187885639363490240191647568,
    1.936631114492359755363277457668,
    -2.353551201881614516821543561516,
    3.066858901050631912893148922704,
    -4.175335600258177138854984177460,
    5.858023729874774148815053846119,
    -8.401032217523977370984161688514,
    12.250753501314460424,
    -18.100697012472442755,
    27.029044799010561650,
)


@jit_hardcore
def series_eval(r: float) -> float:
    """
    Evaluate the 12 term branch point series at r = sqrt(x + 1/e) with Horner's scheme.

    Accurate to working precision for r below sqrt(SERIES_THRESHOLD).
    :param r: square root of the distance to the branch point
    :return: W0 estimate
    """
    c = SERIES_COEFFS
    t8 = c[8] + r * (c[9] + r * (c[10] + r * c[11]))
    t5 = c[5] + r * (c[6] + r * (c[7] + r * t8))
    t1 = c[1] + r * (c[2] + r * (c[3] + r * (c[4] + r * t5)))
    return c[0] + r * t1


@jit_hardcore
def branch_point_seed(q: float) -> float:
    """Cubic truncation of the same expansion, written in p = sqrt(2*e*q).

    Only good as a starting point for the refiner."""
    p = sqrt(2.0 * E * q)
    return -1.0 + p * (1.0 + p * (-1.0 / 3.0 + p * 11.0 / 72.0))


def test_series_at_branch_point():
    assert series_eval(0.0) == -1.0


def test_series_coefficients_untouched():
    assert len(SERIES_COEFFS) == 12
    assert SERIES_COEFFS[0] == -1.0
    # leading Puiseux term is sqrt(2*e)
    assert abs(SERIES_COEFFS[1] - sqrt(2 * E)) < 4 * EPS
    assert SERIES_COEFFS[11] == 27.029044799010561650


def test_series_against_reference():
    import numpy as np
    import scipy.special

    for q in np.geomspace(1e-10, SERIES_THRESHOLD, 50):
        x = q - ONE_OVER_E
        w = series_eval(sqrt(q))
        ref = scipy.special.lambertw(x).real
        assert abs(w - ref) < 1e-8, (q, w, ref)
        # the defining equation holds to rounding of x itself
        assert abs(w * np.exp(w) - x) < 16 * EPS


def test_seed_near_branch_point():
    import scipy.special

    for x in (-0.36, -0.35, -0.3):
        ref = scipy.special.lambertw(x).real
        assert abs(branch_point_seed(x + ONE_OVER_E) - ref) < 0.02, x
    # cubic in p starts from the same point as the full series
    assert branch_point_seed(0.0) == -1.0
