"""Principal branch of the Lambert W function.

W0(x) is the real solution w >= -1 of w*exp(w) = x, defined for x >= -1/e.
https://en.wikipedia.org/wiki/Lambert_W_function

Evaluation never raises on bad arguments, instead every call returns a LambertResult
with an absolute error estimate and a success flag.
"""
import math
import unittest
import warnings
from dataclasses import dataclass

from lambert.halley import halley_iteration
from lambert.series import series_eval, branch_point_seed
from lambert.stuff import EPS, ONE_OVER_E, SERIES_THRESHOLD, MAX_ITERS, float_inf, float_nan


@dataclass(frozen=True)
class LambertResult:
    """Outcome of one W0 evaluation.

    On domain errors (succeeded is False) value and error_estimate are a diagnostic only."""
    value: float
    error_estimate: float
    iteration_count: int
    succeeded: bool

    def __iter__(self):
        return iter((self.value, self.error_estimate, self.iteration_count, self.succeeded))


def evaluate_lambert_w0(x: float, max_iters: int = MAX_ITERS) -> LambertResult:
    """
    Evaluate W0(x).

    Arguments up to SERIES_THRESHOLD above -1/e use the branch point series directly, the rest are
    seeded (series for x < 1, asymptotic otherwise) and refined with Newton/Halley steps.

    :param x: the argument, must be >= -1/e
    :param max_iters: cap on refinement steps
    :return: LambertResult. succeeded is False only if x is below -1/e (or NaN).
    """
    x = float(x)
    q = x + ONE_OVER_E

    if x == 0.0:
        return LambertResult(0.0, 0.0, 0, True)
    if q < 0.0:
        # x may land slightly below -1/e just by rounding upstream, in which case -1 is still
        # a good answer, but it is a domain error nonetheless
        return LambertResult(-1.0, math.sqrt(-q), 0, False)
    if math.isnan(x):
        return LambertResult(float_nan, float_nan, 0, False)
    if x == float_inf:
        return LambertResult(float_inf, 0.0, 0, True)
    if q < SERIES_THRESHOLD:
        w = series_eval(math.sqrt(q))
        return LambertResult(w, 2.0 * EPS * abs(w), 0, True)

    if x < 1.0:
        w = branch_point_seed(q)
    else:
        w = math.log(x)
        if x > 3.0:
            w -= math.log(w)

    w, err, iters, converged = halley_iteration(x, w, max_iters)
    if not converged:
        warnings.warn(f"W0({x!r}) did not converge in {max_iters} iterations", RuntimeWarning)
    return LambertResult(w, err, iters, True)


def lambert_w0(x: float) -> float:
    """Return W0(x), raising ValueError if x is outside the domain"""
    res = evaluate_lambert_w0(x)
    if not res.succeeded:
        raise ValueError("math domain error")
    return res.value


class Test_lambertw(unittest.TestCase):
    def test_zero(self):
        self.assertEqual(evaluate_lambert_w0(0.0), LambertResult(0.0, 0.0, 0, True))
        self.assertEqual(evaluate_lambert_w0(-0.0), LambertResult(0.0, 0.0, 0, True))

    def test_known_values(self):
        for x, ref in [(1.0, 0.5671432904097838),
                       (10.0, 1.7455280027406994),
                       (1e10, 20.02868541330495),
                       (-0.3, -0.4894022271802149),
                       (2.0, 0.8526055020137255),
                       (math.e, 1.0)]:
            res = evaluate_lambert_w0(x)
            self.assertTrue(res.succeeded)
            self.assertGreater(res.iteration_count, 0)
            self.assertLessEqual(abs(res.value - ref), res.error_estimate + 4 * EPS * abs(ref), x)

    def test_omega_constant(self):
        value, err, iters, ok = evaluate_lambert_w0(1)
        self.assertTrue(ok)
        self.assertGreater(iters, 0)
        self.assertAlmostEqual(value, 0.5671432904097838, places=14)

    def test_branch_point(self):
        res = evaluate_lambert_w0(-ONE_OVER_E)
        self.assertTrue(res.succeeded)
        self.assertEqual(res.value, -1.0)
        self.assertEqual(res.iteration_count, 0)
        self.assertLess(res.error_estimate, 1e-15)

        res = evaluate_lambert_w0(-ONE_OVER_E + 1e-12)
        self.assertTrue(res.succeeded)
        self.assertEqual(res.iteration_count, 0)
        self.assertAlmostEqual(res.value, -1.0, delta=1e-5)
        self.assertGreater(res.value, -1.0)

    def test_domain_error(self):
        res = evaluate_lambert_w0(-0.4)
        self.assertFalse(res.succeeded)
        self.assertEqual(res.value, -1.0)
        self.assertAlmostEqual(res.error_estimate, math.sqrt(0.4 - ONE_OVER_E), places=15)

        for x in (-1.0, -1e300, -float_inf):
            self.assertFalse(evaluate_lambert_w0(x).succeeded, x)

        # one ulp below -1/e is reported, but with a tiny diagnostic error
        res = evaluate_lambert_w0(math.nextafter(-ONE_OVER_E, -1.0))
        self.assertFalse(res.succeeded)
        self.assertEqual(res.value, -1.0)
        self.assertLess(res.error_estimate, 1e-7)

        with self.assertRaises(ValueError):
            lambert_w0(-0.4)

    def test_non_finite(self):
        res = evaluate_lambert_w0(float_nan)
        self.assertFalse(res.succeeded)
        self.assertTrue(math.isnan(res.value))
        self.assertEqual(evaluate_lambert_w0(float_inf), LambertResult(float_inf, 0.0, 0, True))

    def test_round_trip(self):
        import numpy as np
        xs = np.concatenate([np.linspace(-ONE_OVER_E, 0.0, 500)[1:],
                             np.geomspace(1e-300, 1e300, 2000)])
        for x in xs:
            w, err, _, ok = evaluate_lambert_w0(x)
            self.assertTrue(ok)
            self.assertGreaterEqual(err, 0.0)
            # error in w propagates through d(w*e^w)/dw = (w+1)*e^w
            bound = 4 * abs(w + 1) * math.exp(w) * err + 8 * EPS * abs(x)
            self.assertLessEqual(abs(w * math.exp(w) - x), bound, x)

    def test_against_scipy(self):
        import numpy as np
        import scipy.special
        xs = np.concatenate([np.linspace(-0.36, 0.0, 200),
                             np.geomspace(1e-20, 1e20, 400)])
        for x in xs:
            res = evaluate_lambert_w0(x)
            ref = scipy.special.lambertw(x).real
            self.assertLessEqual(abs(res.value - ref), res.error_estimate + 8 * EPS * max(1.0, abs(ref)), x)

    def test_regime_continuity(self):
        # the same x run through the series and through the refiner
        x = SERIES_THRESHOLD - ONE_OVER_E
        q = x + ONE_OVER_E
        s = series_eval(math.sqrt(q))
        s_err = 2.0 * EPS * abs(s)
        h, h_err, _, ok = halley_iteration(x, branch_point_seed(q))
        self.assertTrue(ok)
        self.assertLessEqual(abs(s - h), s_err + h_err)

        below = evaluate_lambert_w0(math.nextafter(x, -1.0))
        above = evaluate_lambert_w0(math.nextafter(x, 0.0))
        self.assertEqual(below.iteration_count, 0)
        self.assertGreater(above.iteration_count, 0)
        self.assertAlmostEqual(below.value, above.value, delta=1e-12)

    def test_monotonic(self):
        """Non-decreasing on a grid coarser than the rounding noise.

        Neighbouring doubles may come out an ulp apart in the wrong order, but never by more than
        the reported error estimates."""
        import numpy as np
        xs = np.concatenate([-ONE_OVER_E + np.geomspace(1e-15, ONE_OVER_E, 1000)[:-1],
                             np.geomspace(1e-15, 1e15, 1000)])
        values = [evaluate_lambert_w0(x).value for x in xs]
        self.assertTrue(np.all(np.diff(values) >= 0))

        x = -0.36687944117139615
        for _ in range(200):
            lo = evaluate_lambert_w0(x)
            x = math.nextafter(x, 0.0)
            hi = evaluate_lambert_w0(x)
            self.assertLessEqual(lo.value - hi.value, lo.error_estimate + hi.error_estimate, x)

    def test_top_of_double_range(self):
        import sys
        import scipy.special
        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            for x in (1e308, 1.5e308, sys.float_info.max):
                res = evaluate_lambert_w0(x)
                self.assertTrue(res.succeeded)
                self.assertTrue(math.isfinite(res.value), x)
                self.assertGreaterEqual(res.error_estimate, 0.0)
                self.assertLess(res.iteration_count, MAX_ITERS)
                ref = scipy.special.lambertw(x).real
                self.assertLessEqual(abs(res.value - ref), res.error_estimate + 8 * EPS * ref, x)
        self.assertAlmostEqual(lambert_w0(sys.float_info.max), 703.2270331047702, delta=1e-12)

    def test_iteration_cap(self):
        with self.assertWarns(RuntimeWarning):
            res = evaluate_lambert_w0(1e10, max_iters=1)
        self.assertTrue(res.succeeded)
        self.assertEqual(res.iteration_count, 1)
        self.assertEqual(res.error_estimate, abs(res.value))

    def test_result_is_immutable(self):
        res = evaluate_lambert_w0(1.0)
        with self.assertRaises(AttributeError):
            res.value = 0.0

    def test_lambert_w0(self):
        self.assertAlmostEqual(lambert_w0(10), 1.7455280027406994, places=14)
        self.assertEqual(lambert_w0(-ONE_OVER_E), -1.0)


if __name__ == "__main__":
    from timeit import timeit

    print(f"{'x':>12} {'W0(x)':>22} {'error':>10} {'iters':>5}")
    for x in [-ONE_OVER_E, -0.3, 0.0, 1.0, 10.0, 1e10, -0.4]:
        r = evaluate_lambert_w0(x)
        print(f"{x:12.6g} {r.value:22.16g} {r.error_estimate:10.3g} {r.iteration_count:5d}"
              f"{'' if r.succeeded else '  domain error'}")

    n_times = 100000
    time_taken = timeit(lambda: evaluate_lambert_w0(7.5), number=n_times)
    print(f"{time_taken / n_times * 1e6:.3f} us per call")
