"""
System sizing and pricing module.
Derives installed power, equipment counts, investment and payment installments.
"""

import math
from typing import List

from .formatting import round_half_up
from .inputs import FinancialConfig


class SizingModel:
    """Sizes a solar installation from monthly consumption."""

    def __init__(self, config: FinancialConfig):
        self.config = config

    def calculate_power_kw(self, monthly_kwh: float) -> float:
        """
        Installed power needed to cover a monthly consumption.

        Args:
            monthly_kwh: Monthly energy consumption (kWh)

        Returns:
            Power in kW rounded to two decimals, NaN if input is NaN
        """
        if math.isnan(monthly_kwh):
            return math.nan

        c = self.config
        monthly_yield_per_kw = c.sun_hours * c.days_per_month * c.performance_ratio
        power = (monthly_kwh * c.loss_factor) / monthly_yield_per_kw
        return round_half_up(power, 2)

    def calculate_panels(self, power_kw: float) -> float:
        """Panel count, rounded up so the array is never undersized."""
        if not math.isfinite(power_kw):
            return math.nan
        return float(math.ceil(round_half_up(power_kw * 1000 / self.config.panel_watts, 9)))

    def calculate_inverters(self, power_kw: float) -> float:
        """Inverter count, rounded up."""
        if not math.isfinite(power_kw):
            return math.nan
        return float(math.ceil(round_half_up(power_kw / self.config.inverter_kw, 9)))

    def calculate_investment(self, power_kw: float) -> float:
        """Total investment in whole currency units."""
        if not math.isfinite(power_kw):
            return math.nan
        return round_half_up(power_kw * self.config.cost_per_kw, 0)

    def calculate_tax_benefit(self, investment: float) -> float:
        """Tax benefit as a fixed share of the investment."""
        if not math.isfinite(investment):
            return math.nan
        return round_half_up(investment * self.config.tax_benefit_fraction, 0)

    def calculate_monthly_savings(self, monthly_bill: float) -> float:
        """Year-one monthly savings captured from the current bill."""
        if not math.isfinite(monthly_bill):
            return math.nan
        return monthly_bill * self.config.savings_capture_rate

    def calculate_payments(self, investment: float) -> List[float]:
        """Disbursement installments PAGO1..PAGO4."""
        if not math.isfinite(investment):
            return [math.nan] * len(self.config.payment_split)
        return [round_half_up(investment * share, 0) for share in self.config.payment_split]
