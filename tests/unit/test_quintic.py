import numpy as np
import pytest

from ur5e_pmp.smooth_motion.quintic import QuinticPolynomial, quintic_coeffs
from ur5e_pmp.utils.errors import InvalidDurationError, SingularSystemError


def _eval(a, t):
    q = sum(a[i] * t**i for i in range(6))
    dq = sum(i * a[i] * t ** (i - 1) for i in range(1, 6))
    ddq = sum(i * (i - 1) * a[i] * t ** (i - 2) for i in range(2, 6))
    return q, dq, ddq


@pytest.mark.parametrize(
    "q0,v0,a0,q1,v1,a1,T",
    [
        (0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 1.0),
        (-0.5, 0.2, -1.0, 1.2, -0.3, 0.4, 2.5),
        (3.0, 0.0, 0.0, -3.0, 0.0, 0.0, 0.4),
        (0.1, 1.0, 2.0, 0.1, -1.0, -2.0, 1.7),
    ],
)
def test_boundary_conditions_hold(q0, v0, a0, q1, v1, a1, T):
    a = quintic_coeffs(q0, v0, a0, q1, v1, a1, T)
    assert a.shape == (6,)

    assert _eval(a, 0.0) == pytest.approx((q0, v0, a0), abs=1e-9)
    assert _eval(a, T) == pytest.approx((q1, v1, a1), abs=1e-9)


def test_classical_minimum_jerk_coefficients():
    # q(t) = q0 + d (10 s^3 - 15 s^4 + 6 s^5), s = t/T
    q0, q1, T = 0.3, 1.3, 2.0
    d = q1 - q0
    a = quintic_coeffs(q0, 0.0, 0.0, q1, 0.0, 0.0, T)
    expected = [q0, 0.0, 0.0, 10 * d / T**3, -15 * d / T**4, 6 * d / T**5]
    assert np.allclose(a, expected, atol=1e-12)


@pytest.mark.parametrize("T", [0.0, 1e-9, 5e-10, -1.0])
def test_invalid_duration(T):
    with pytest.raises(InvalidDurationError):
        quintic_coeffs(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, T)


def test_short_duration_is_accepted():
    a = quintic_coeffs(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.05)
    assert np.allclose(a, 0.0)


def test_millisecond_duration_hits_pivot_tolerance():
    # Last pivot scales like T^5/6, below the absolute tolerance for T = 1 ms
    with pytest.raises(SingularSystemError):
        quintic_coeffs(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 1e-3)


def test_polynomial_derivatives_match_coefficients():
    poly = QuinticPolynomial(0.0, 2.0, T=1.5)
    c = poly.coeffs
    t = 0.6
    assert poly.position(t) == pytest.approx(sum(c[i] * t**i for i in range(6)))
    assert poly.jerk(t) == pytest.approx(6 * c[3] + 24 * c[4] * t + 60 * c[5] * t**2)
    assert poly.jerk_rate(t) == pytest.approx(24 * c[4] + 120 * c[5] * t)
    assert poly.evaluate(t, 5) == pytest.approx(120 * c[5])
    with pytest.raises(ValueError):
        poly.evaluate(t, 6)


def test_validate_continuity_all_true():
    poly = QuinticPolynomial(-1.0, 0.5, v0=0.1, vf=-0.2, a0=0.3, af=0.0, T=1.2)
    assert all(poly.validate_continuity(tolerance=1e-9).values())


def test_from_coeffs_round_trips_boundaries():
    src = QuinticPolynomial(0.25, -0.75, T=0.8)
    wrapped = QuinticPolynomial.from_coeffs(src.coeffs, 0.8)
    assert wrapped.q0 == pytest.approx(0.25)
    assert wrapped.qf == pytest.approx(-0.75)
    assert wrapped.boundary_conditions["vf"] == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("T", [float("inf"), float("nan"), float("-inf")])
def test_non_finite_duration(T):
    with pytest.raises(InvalidDurationError):
        quintic_coeffs(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, T)


def test_evaluate_over_sample_array():
    poly = QuinticPolynomial(0.0, 1.0, T=2.0)
    t = np.linspace(0.0, 2.0, 9)
    for order in range(6):
        values = poly.evaluate(t, order)
        assert values.shape == t.shape
        assert values.tolist() == pytest.approx([poly.evaluate(float(x), order) for x in t])
    assert isinstance(poly.evaluate(0.5, 5), float)
