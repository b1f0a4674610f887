"""Polishing of an initial W0 estimate by solving w*exp(w) = x with Newton/Halley steps."""
from math import exp
from typing import Tuple

from lambert.numba_opt import jit_hardcore
from lambert.stuff import EPS, MAX_ITERS


@jit_hardcore
def halley_iteration(x: float, w: float, max_iters: int = MAX_ITERS) -> Tuple[float, float, int, bool]:
    """
    Refine w until w*exp(w) = x to machine precision.

    Positive w takes Newton steps, everything else takes Halley steps
    (plain Newton stagnates or overshoots close to w = -1).

    :param x: argument of W0, must be above the branch point
    :param w: initial guess
    :param max_iters: iteration cap
    :return: (value, error estimate, iterations taken, converged)
    """
    for i in range(1, max_iters + 1):
        e = exp(w)
        p = w + 1.0

        if w > 0:
            # Newton, written so that w*e is never formed (it overflows near the top of the double range)
            t = (w - x / e) / p
        else:
            # Halley
            t = w * e - x
            t = t / (e * p - 0.5 * (p + 1.0) * t / p)

        w = w - t

        tol = EPS * max(abs(w), 1.0 / (abs(p) * e))
        if abs(t) < tol:
            return w, 2.0 * tol, i, True

    return w, abs(w), max_iters, False


def test_halley_converges_from_rough_guess():
    from math import log
    w, err, n, ok = halley_iteration(10.0, log(10.0) - log(log(10.0)))
    assert ok
    assert 0 < n < 10
    assert abs(w - 1.7455280027406994) <= err + 4 * EPS
    assert err > 0


def test_halley_negative_branch():
    # x < 0 keeps every iterate at w <= 0, so only Halley steps are taken
    w, err, n, ok = halley_iteration(-0.3, -0.48)
    assert ok
    assert abs(w - -0.4894022271802149) <= err + 4 * EPS


def test_halley_cap_exhausted():
    w, err, n, ok = halley_iteration(1e10, 19.0, 2)
    assert not ok
    assert n == 2
    assert err == abs(w)


def test_halley_top_of_double_range():
    import sys
    from math import isfinite, log
    x = sys.float_info.max
    w, err, n, ok = halley_iteration(x, log(x) - log(log(x)))
    assert ok
    assert isfinite(w)
    assert abs(w - 703.2270331047702) <= err + 4 * EPS * w
