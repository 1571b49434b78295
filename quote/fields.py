"""
Quote field computation.
Fills in every technical and financial field the request did not supply and
formats the result for the page templates.
"""

import math
from datetime import datetime
from typing import Callable, Dict, Any, Mapping, Optional

from .cashflow import CashflowModel
from .formatting import (
    format_co, format_date, format_decimal, format_percent, format_raw, round_half_up,
)
from .inputs import FinancialConfig
from .metrics import MetricsCalculator
from .schema import QuoteInput
from .sizing import SizingModel


PAYMENT_FIELDS = ('PAGO1', 'PAGO2', 'PAGO3', 'PAGO4')

# Fields shown with thousands grouping, whether supplied or derived
MAGNITUDE_FIELDS = (
    'INVERSION_TOTAL', 'BENEFICIO_TRIBUTARIO', 'AHORRO_TOTAL', 'AHORRO_MENSUAL',
    'VPN', 'FACTURA', 'ENERGIA', 'IVA_MATERIALES',
) + PAYMENT_FIELDS


def _nan_if_none(value: Optional[float]) -> float:
    return math.nan if value is None else value


def _format_ratio(value: float) -> str:
    return format_raw(round_half_up(value, 2))


def _format_years(value: float) -> str:
    return format_decimal(value, 1)


def _format_amount(value: float) -> str:
    return format_co(round_half_up(value, 0))


class FieldComputer:
    """Derives the complete quote field set from a partial request."""

    def __init__(self, config: Optional[FinancialConfig] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.config = config or FinancialConfig()
        self.clock = clock
        self.sizing = SizingModel(self.config)
        self.cashflow_model = CashflowModel(self.config)
        self.metrics_calc = MetricsCalculator(self.config)

    def _sheet_value(self, quote: QuoteInput, name: str) -> float:
        ref = self.config.sheet_cells.get(name)
        if ref is None:
            return math.nan
        return quote.sheet_number(ref)

    def _resolve(self, quote: QuoteInput, out: Dict[str, str], name: str,
                 derive: Callable[[], float], render: Callable[[float], str]) -> float:
        """
        Resolve one field: explicit input, then spreadsheet cell, then derivation.

        Supplied values are left untouched in `out`; resolved ones are rendered.

        Returns:
            Numeric value used by dependent fields (NaN when unknown)
        """
        if quote.has(name):
            return quote.number(name)

        value = self._sheet_value(quote, name)
        if not math.isfinite(value):
            value = derive()

        out[name] = render(value)
        return value

    def compute_fields(self, raw: Mapping[str, Any]) -> Dict[str, str]:
        """
        Compute all quote fields.

        Args:
            raw: Request data (field name -> str/number, plus an optional
                nested mapping of spreadsheet results)

        Returns:
            Field name -> display string; unknown values are ''
        """
        quote = QuoteInput(raw, self.config.sheet_results_key)
        out = quote.as_strings()
        c = self.config

        if not quote.has('FECHA'):
            now = self.clock() if self.clock else None
            out['FECHA'] = format_date(now, c.timezone, c.date_format)

        energy = quote.number('ENERGIA')
        bill = quote.number('FACTURA')

        # Technical sizing
        power = self._resolve(quote, out, 'POTENCIA',
                              lambda: self.sizing.calculate_power_kw(energy), format_raw)
        self._resolve(quote, out, 'PANELES',
                      lambda: self.sizing.calculate_panels(power), format_raw)
        self._resolve(quote, out, 'INVERSORES',
                      lambda: self.sizing.calculate_inverters(power), format_raw)

        # Pricing
        investment = self._resolve(quote, out, 'INVERSION_TOTAL',
                                   lambda: self.sizing.calculate_investment(power), _format_amount)
        tax_benefit = self._resolve(quote, out, 'BENEFICIO_TRIBUTARIO',
                                    lambda: self.sizing.calculate_tax_benefit(investment), _format_amount)
        monthly_savings = self._resolve(quote, out, 'AHORRO_MENSUAL',
                                        lambda: self.sizing.calculate_monthly_savings(bill), _format_amount)

        # Projection
        cf = self.cashflow_model.build_from_config(investment, monthly_savings, tax_benefit)
        metrics = self.metrics_calc.calculate_all_metrics(cf)

        self._resolve(quote, out, 'TIR', lambda: _nan_if_none(metrics.irr), format_percent)
        self._resolve(quote, out, 'BC', lambda: _nan_if_none(metrics.benefit_cost_ratio), _format_ratio)
        self._resolve(quote, out, 'RECUPERACION_INVERSION',
                      lambda: _nan_if_none(metrics.payback_years), _format_years)
        self._resolve(quote, out, 'AHORRO_TOTAL',
                      lambda: _nan_if_none(metrics.total_savings), _format_amount)
        self._resolve(quote, out, 'VPN', lambda: _nan_if_none(metrics.npv), _format_amount)
        self._resolve(quote, out, 'ROI', lambda: _nan_if_none(metrics.roi), format_percent)

        # Disbursement schedule
        payments = self.sizing.calculate_payments(investment)
        for name, amount in zip(PAYMENT_FIELDS, payments):
            self._resolve(quote, out, name, lambda amount=amount: amount, _format_amount)

        if not quote.has('ENERGIA'):
            out['ENERGIA'] = ''
        if not quote.has('FACTURA'):
            out['FACTURA'] = ''

        # Supplied magnitudes get grouped too; unparsable ones stay verbatim
        for name in MAGNITUDE_FIELDS:
            if quote.has(name):
                formatted = format_co(quote.get(name))
                if formatted:
                    out[name] = formatted

        return out


def compute_fields(raw: Mapping[str, Any], config: Optional[FinancialConfig] = None) -> Dict[str, str]:
    """
    Convenience function to compute quote fields with a default config.

    Args:
        raw: Request data
        config: Financial config (defaults if omitted)

    Returns:
        Fully computed, formatted field mapping
    """
    return FieldComputer(config).compute_fields(raw)
