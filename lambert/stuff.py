from math import e as E

# double precision machine epsilon
EPS = 2.2204460492503131e-16

ONE_OVER_E = 1 / E

# below this distance from the branch point the series is used directly
SERIES_THRESHOLD = 1.0e-3

MAX_ITERS = 100

float_inf = float("Inf")
float_nan = float("NaN")


def test_constants():
    import sys
    assert EPS == sys.float_info.epsilon
    assert abs(ONE_OVER_E * E - 1.0) <= EPS
