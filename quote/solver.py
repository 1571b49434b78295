"""
IRR root finding.
Newton-Raphson on the NPV curve with a bisection fallback over a fixed bracket.
"""

import warnings
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.optimize import newton


@dataclass(frozen=True)
class SolverSettings:
    max_iter: int = 100
    tol: float = 1e-10
    min_derivative: float = 1e-12
    bracket_low: float = -0.9
    bracket_high: float = 5.0
    bisect_max_iter: int = 200
    bisect_tol: float = 1e-6


DEFAULT_SETTINGS = SolverSettings()


def npv(flows: Sequence[float], rate: float) -> float:
    """Net present value of flows indexed by year (flow[0] undiscounted)."""
    values = np.asarray(flows, dtype=float)
    t = np.arange(len(values))
    with np.errstate(all='ignore'):
        return float(np.sum(values / (1.0 + rate) ** t))


def npv_derivative(flows: Sequence[float], rate: float) -> float:
    """d(NPV)/d(rate)."""
    values = np.asarray(flows, dtype=float)
    t = np.arange(len(values))
    with np.errstate(all='ignore'):
        return float(np.sum(-t * values / (1.0 + rate) ** (t + 1)))


def has_sign_change(flows: Sequence[float]) -> bool:
    values = np.asarray(flows, dtype=float)
    return bool(np.any(values > 0) and np.any(values < 0))


def _newton(flows, guess: float, settings: SolverSettings) -> Optional[float]:
    def fprime(rate):
        d = npv_derivative(flows, rate)
        # scipy stops without converging on an exactly-zero derivative
        return 0.0 if abs(d) < settings.min_derivative else d

    with warnings.catch_warnings(), np.errstate(all='ignore'):
        warnings.simplefilter('ignore', RuntimeWarning)
        try:
            root, info = newton(
                lambda rate: npv(flows, rate), guess, fprime=fprime,
                tol=settings.tol, maxiter=settings.max_iter,
                full_output=True, disp=False,
            )
        except (RuntimeError, OverflowError, ZeroDivisionError):
            return None

    root = float(root)
    if not info.converged or not np.isfinite(root) or root <= -1.0:
        return None
    return root


def _bisect(flows, settings: SolverSettings) -> Optional[float]:
    lo = settings.bracket_low
    hi = settings.bracket_high
    f_lo = npv(flows, lo)
    f_hi = npv(flows, hi)

    if not (np.isfinite(f_lo) and np.isfinite(f_hi)):
        return None
    if f_lo == 0:
        return lo
    if f_hi == 0:
        return hi
    if f_lo * f_hi > 0:
        return None

    mid = 0.5 * (lo + hi)
    for _ in range(settings.bisect_max_iter):
        mid = 0.5 * (lo + hi)
        f_mid = npv(flows, mid)
        if abs(f_mid) <= settings.bisect_tol:
            return mid
        if f_lo * f_mid < 0:
            hi = mid
        else:
            lo = mid
            f_lo = f_mid

    return mid


def irr(flows: Sequence[float], initial_guess: float = 0.1,
        settings: SolverSettings = DEFAULT_SETTINGS) -> Optional[float]:
    """
    Internal rate of return of a yearly cashflow.

    Args:
        flows: Signed flows, index 0 = initial outflow
        initial_guess: Starting rate for Newton-Raphson
        settings: Iteration limits and tolerances

    Returns:
        IRR as decimal (e.g. 0.12 for 12%), or None when the flows never
        change sign, contain NaN, or no root is found in the bracket
    """
    values = np.asarray(flows, dtype=float)
    if len(values) < 2 or not np.all(np.isfinite(values)):
        return None
    if not has_sign_change(values):
        return None

    rate = _newton(values, initial_guess, settings)
    if rate is not None:
        return rate

    return _bisect(values, settings)
