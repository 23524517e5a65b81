"""Tests for chi-squared distribution functions"""
import pytest
from scipy import stats

from occam_vbm.distributions import (
    BAD_DF, BAD_PROBABILITY, BAD_VALUE, OK, chin2, csa, ppchi,
)


def test_csa():
    assert csa(3.0, 2) == pytest.approx(stats.chi2.sf(3.0, 2))
    assert csa(0.0, 0) == 1.0
    assert csa(2.0, 0) == 0.0


def test_ppchi():
    value, errcode = ppchi(0.05, 1)
    assert errcode == OK
    assert value == pytest.approx(3.841458820694124)
    assert ppchi(1.5, 1)[1] == BAD_PROBABILITY
    assert ppchi(0.05, 0)[1] == BAD_DF


def test_chin2():
    value, errcode = chin2(4.0, 3, 0.0)
    assert errcode == OK
    assert value == pytest.approx(stats.chi2.cdf(4.0, 3), rel=1e-6)
    assert chin2(4.0, 3, 2.0)[0] < value
    assert chin2(1.0, 0, 1.0) == (1.0, BAD_DF)
    assert chin2(-1.0, 2, 1.0)[1] == BAD_VALUE
