"""
Pure correlation statistics: Pearson r, OLS regression, a t-test p-value and
strength classification. Degenerate input yields neutral values, never errors.
"""
import math
from collections.abc import Sequence

from schemas.correlation import StrengthLabel

MIN_PEARSON_POINTS = 3
MIN_REGRESSION_POINTS = 2
NORMAL_APPROX_DF = 100

# Guards 1 - r^2 when |r| -> 1.
R_SQUARED_EPSILON = 1e-15

BETA_MAX_ITERATIONS = 200
BETA_EPSILON = 1e-14
BETA_TINY = 1e-30

LANCZOS_G = 7
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

# Abramowitz & Stegun 7.1.26
_AS_A1 = 0.254829592
_AS_A2 = -0.284496736
_AS_A3 = 1.421413741
_AS_A4 = -1.453152027
_AS_A5 = 1.061405429
_AS_P = 0.3275911


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Product-moment correlation. 0 if fewer than 3 points or either series is flat."""
    n = len(xs)
    if n != len(ys) or n < MIN_PEARSON_POINTS:
        return 0.0
    mx = _mean(xs)
    my = _mean(ys)
    dx = [x - mx for x in xs]
    dy = [y - my for y in ys]
    ss_xx = sum(d * d for d in dx)
    ss_yy = sum(d * d for d in dy)
    if ss_xx == 0 or ss_yy == 0:
        return 0.0
    ss_xy = sum(a * b for a, b in zip(dx, dy))
    r = ss_xy / math.sqrt(ss_xx * ss_yy)
    return max(-1.0, min(1.0, r))


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> tuple[float, float]:
    """OLS fit of y on x as (slope, intercept); (0, mean(y)) when undefined."""
    n = min(len(xs), len(ys))
    my = _mean(ys[:n])
    if n < MIN_REGRESSION_POINTS:
        return 0.0, my
    mx = _mean(xs[:n])
    ss_xx = sum((x - mx) ** 2 for x in xs[:n])
    if ss_xx == 0:
        return 0.0, my
    ss_xy = sum((x - mx) * (y - my) for x, y in zip(xs[:n], ys[:n]))
    slope = ss_xy / ss_xx
    return slope, my - slope * mx


def ln_gamma(x: float) -> float:
    """log|Gamma(x)| via the Lanczos approximation (g=7), reflected below 0.5."""
    if x < 0.5:
        return math.log(math.pi / abs(math.sin(math.pi * x))) - ln_gamma(1 - x)
    x -= 1
    a = LANCZOS_COEFFICIENTS[0]
    t = x + LANCZOS_G + 0.5
    for i in range(1, LANCZOS_G + 2):
        a += LANCZOS_COEFFICIENTS[i] / (x + i)
    return 0.5 * math.log(2 * math.pi) + (x + 0.5) * math.log(t) - t + math.log(a)


def _beta_continued_fraction(x: float, a: float, b: float) -> float:
    """Lentz's method for the incomplete beta continued fraction."""
    qab = a + b
    qap = a + 1
    qam = a - 1
    c = 1.0
    d = 1 - qab * x / qap
    if abs(d) < BETA_TINY:
        d = BETA_TINY
    d = 1 / d
    h = d
    for m in range(1, BETA_MAX_ITERATIONS + 1):
        m2 = 2 * m
        # even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1 + aa * d
        if abs(d) < BETA_TINY:
            d = BETA_TINY
        c = 1 + aa / c
        if abs(c) < BETA_TINY:
            c = BETA_TINY
        d = 1 / d
        h *= d * c
        # odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1 + aa * d
        if abs(d) < BETA_TINY:
            d = BETA_TINY
        c = 1 + aa / c
        if abs(c) < BETA_TINY:
            c = BETA_TINY
        d = 1 / d
        delta = d * c
        h *= delta
        if abs(delta - 1) < BETA_EPSILON:
            break
    return h


def incomplete_beta(x: float, a: float, b: float) -> float:
    """Regularized incomplete beta I_x(a, b) for a, b > 0."""
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0
    ln_beta = ln_gamma(a) + ln_gamma(b) - ln_gamma(a + b)
    front = math.exp(a * math.log(x) + b * math.log(1 - x) - ln_beta)
    # The fraction converges fast only below (a+1)/(a+b+2); use symmetry above it.
    if x < (a + 1) / (a + b + 2):
        return front * _beta_continued_fraction(x, a, b) / a
    return 1 - front * _beta_continued_fraction(1 - x, b, a) / b


def normal_cdf(z: float) -> float:
    sign = -1 if z < 0 else 1
    x = abs(z) / math.sqrt(2)
    t = 1 / (1 + _AS_P * x)
    y = 1 - ((((_AS_A5 * t + _AS_A4) * t + _AS_A3) * t + _AS_A2) * t + _AS_A1) * t * math.exp(-x * x)
    return 0.5 * (1 + sign * y)


def approximate_p_value(r: float, n: int) -> float:
    """Two-tailed p-value for H0: no correlation, from the Student t distribution."""
    df = n - 2
    if df <= 0:
        return 1.0
    t = abs(r) * math.sqrt(df / (1 - r * r + R_SQUARED_EPSILON))

    if df > NORMAL_APPROX_DF:
        z = t * (1 - 1 / (4 * df)) / math.sqrt(1 + t * t / (2 * df))
        p = 2 * (1 - normal_cdf(z))
    else:
        p = incomplete_beta(df / (df + t * t), df / 2, 0.5)
    return min(1.0, max(0.0, p))


def classify(r: float) -> StrengthLabel:
    abs_r = abs(r)
    if abs_r >= 0.7:
        return "strong_positive" if r > 0 else "strong_negative"
    if abs_r >= 0.4:
        return "moderate_positive" if r > 0 else "moderate_negative"
    if abs_r >= 0.2:
        return "weak_positive" if r > 0 else "weak_negative"
    return "none"
