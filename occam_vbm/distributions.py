"""
Chi-squared distribution functions used for model significance.

csa:   upper tail probability of the chi-squared distribution
ppchi: chi-squared critical value for an upper tail probability
chin2: noncentral chi-squared cumulative distribution

ppchi and chin2 return an error code alongside the value; zero means
success. Callers report nonzero codes and keep going with the value.
"""

import math
from typing import Tuple

import scipy.stats as stats

# Error codes
OK = 0
BAD_PROBABILITY = 1
BAD_DF = 2
BAD_VALUE = 3
NOT_FINITE = 4


def csa(x: float, df: float) -> float:
    """Probability that a chi-squared variable with df degrees of freedom exceeds x"""
    if df <= 0:
        return 1.0 if x <= 0 else 0.0
    return float(stats.chi2.sf(max(x, 0.0), df))


def ppchi(p: float, df: float) -> Tuple[float, int]:
    """Chi-squared value with upper tail probability p"""
    if not 0.0 < p < 1.0:
        return 0.0, BAD_PROBABILITY
    if df <= 0:
        return 0.0, BAD_DF
    value = float(stats.chi2.isf(p, df))
    if not math.isfinite(value):
        return value, NOT_FINITE
    return value, OK


def chin2(x: float, df: float, theta: float) -> Tuple[float, int]:
    """Noncentral chi-squared CDF at x with df degrees of freedom and noncentrality theta"""
    if df <= 0:
        return 1.0, BAD_DF
    if x < 0 or theta < 0:
        return 0.0, BAD_VALUE
    value = float(stats.ncx2.cdf(x, df, theta))
    if not math.isfinite(value):
        return value, NOT_FINITE
    return value, OK
