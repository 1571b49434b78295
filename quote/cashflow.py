"""
Cashflow projection module.
Builds the yearly table of savings, O&M and tax benefit behind the quote metrics.
"""

import pandas as pd
import numpy as np

from .inputs import FinancialConfig


class CashflowModel:
    """Builds the year-indexed cashflow of a solar installation."""

    def __init__(self, config: FinancialConfig):
        self.config = config

    def build_flows(self, investment: float, monthly_savings: float, years: int,
                    degradation_rate: float, om_rate: float, tax_benefit: float,
                    tax_benefit_policy: str, spread_years: int = 5) -> pd.DataFrame:
        """
        Build the yearly cashflow table.

        Year 0 carries the investment outflow. For each year y in 1..years:
        savings = monthly_savings * (1 - degradation_rate)^(y-1) * 12,
        O&M = investment * om_rate, and the tax benefit is recognized either
        entirely in year 1 ('year_one') or evenly over the first
        `spread_years` years ('spread').

        Args:
            investment: Total investment (positive number)
            monthly_savings: Year-one monthly savings
            years: Evaluation horizon
            degradation_rate: Annual decline of savings (decimal)
            om_rate: Annual O&M cost as a share of investment
            tax_benefit: Total tax benefit amount
            tax_benefit_policy: 'year_one' or 'spread'
            spread_years: Years over which a spread benefit is recognized

        Returns:
            DataFrame with columns: year, savings, om_cost, tax_benefit,
            investment, net_flow, cumulative_flow
        """
        year = np.arange(years + 1)
        operating = year >= 1

        savings = np.where(
            operating,
            monthly_savings * (1.0 - degradation_rate) ** np.maximum(year - 1, 0) * 12,
            0.0,
        )
        om_cost = np.where(operating, investment * om_rate, 0.0)

        benefit = np.zeros(years + 1)
        if tax_benefit_policy == 'year_one':
            if years >= 1:
                benefit[1] = tax_benefit
        elif tax_benefit_policy == 'spread':
            last = min(spread_years, years)
            benefit[1:last + 1] = tax_benefit / spread_years
        else:
            raise ValueError(f"Unknown tax benefit policy: {tax_benefit_policy}")

        outflow = np.zeros(years + 1)
        outflow[0] = investment

        cf = pd.DataFrame({
            'year': year,
            'savings': savings,
            'om_cost': om_cost,
            'tax_benefit': benefit,
            'investment': outflow,
        })
        cf['net_flow'] = cf['savings'] - cf['om_cost'] + cf['tax_benefit'] - cf['investment']
        cf['cumulative_flow'] = cf['net_flow'].cumsum()

        return cf

    def build_from_config(self, investment: float, monthly_savings: float,
                          tax_benefit: float) -> pd.DataFrame:
        """Build flows using the configured horizon, rates and benefit policy."""
        c = self.config
        return self.build_flows(
            investment, monthly_savings, c.horizon_years,
            c.degradation_rate, c.om_rate, tax_benefit,
            c.tax_benefit_policy, c.tax_benefit_spread_years,
        )
