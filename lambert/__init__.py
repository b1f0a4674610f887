from lambert.lambertw import LambertResult, evaluate_lambert_w0, lambert_w0
from lambert.stuff import EPS, ONE_OVER_E, SERIES_THRESHOLD, MAX_ITERS

__all__ = ["LambertResult", "evaluate_lambert_w0", "lambert_w0",
           "EPS", "ONE_OVER_E", "SERIES_THRESHOLD", "MAX_ITERS"]
