"""
Financial metrics calculation module.
Calculates NPV, IRR, payback, benefit/cost ratio, ROI and lifetime savings.
"""

import math
import pandas as pd
import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence

from .inputs import FinancialConfig
from .solver import irr, npv


@dataclass(frozen=True)
class FinancialMetrics:
    npv: Optional[float]
    irr: Optional[float]
    payback_years: Optional[float]
    benefit_cost_ratio: Optional[float]
    roi: Optional[float]
    total_savings: Optional[float]


def _finite_or_none(value: float) -> Optional[float]:
    return float(value) if value is not None and math.isfinite(value) else None


class MetricsCalculator:
    """Calculates financial metrics from the yearly cashflow table."""

    def __init__(self, config: FinancialConfig):
        self.config = config
        self.discount_rate = config.discount_rate

    def calculate_npv(self, flows: Sequence[float], rate: Optional[float] = None) -> Optional[float]:
        """NPV at the configured (or given) discount rate."""
        rate = self.discount_rate if rate is None else rate
        return _finite_or_none(npv(flows, rate))

    def calculate_irr(self, flows: Sequence[float]) -> Optional[float]:
        return irr(flows, self.config.irr_initial_guess)

    def calculate_payback(self, flows: Sequence[float]) -> Optional[float]:
        """
        Simple payback period (years), linearly interpolated within the year
        in which the cumulative flow first becomes non-negative.

        Args:
            flows: Net yearly flows, index 0 = investment year

        Returns:
            Fractional years, or None if never recovered within the horizon
        """
        values = np.asarray(flows, dtype=float)
        if len(values) == 0 or not np.all(np.isfinite(values)):
            return None

        cumulative = np.cumsum(values)
        if cumulative[0] >= 0:
            return 0.0

        for year in range(1, len(values)):
            if cumulative[year] >= 0:
                outstanding = -cumulative[year - 1]
                return float((year - 1) + outstanding / values[year])

        return None

    def calculate_benefit_cost_ratio(self, cf: pd.DataFrame) -> Optional[float]:
        """
        PV of gross benefits (savings + tax benefit) over PV of costs
        (investment + O&M).
        """
        discount = (1.0 + self.discount_rate) ** -cf['year'].astype(float)
        benefits = ((cf['savings'] + cf['tax_benefit']) * discount).sum(skipna=False)
        costs = ((cf['investment'] + cf['om_cost']) * discount).sum(skipna=False)

        if not (math.isfinite(benefits) and math.isfinite(costs)) or costs <= 0:
            return None
        return float(benefits / costs)

    def calculate_roi(self, cf: pd.DataFrame) -> Optional[float]:
        """Undiscounted net benefit over the horizon relative to investment."""
        investment = cf['investment'].sum(skipna=False)
        if not math.isfinite(investment) or investment <= 0:
            return None
        gain = (cf['savings'] + cf['tax_benefit'] - cf['om_cost']).sum(skipna=False)
        return _finite_or_none((gain - investment) / investment)

    def calculate_total_savings(self, cf: pd.DataFrame) -> Optional[float]:
        """Sum of degraded yearly savings (excludes O&M and tax benefit)."""
        return _finite_or_none(cf['savings'].sum(skipna=False))

    def calculate_all_metrics(self, cf: pd.DataFrame) -> FinancialMetrics:
        """
        Calculate all financial metrics.

        Args:
            cf: Cashflow table from CashflowModel

        Returns:
            FinancialMetrics; undefined values are None
        """
        flows = cf['net_flow'].to_numpy()

        return FinancialMetrics(
            npv=self.calculate_npv(flows),
            irr=self.calculate_irr(flows),
            payback_years=self.calculate_payback(flows),
            benefit_cost_ratio=self.calculate_benefit_cost_ratio(cf),
            roi=self.calculate_roi(cf),
            total_savings=self.calculate_total_savings(cf),
        )
