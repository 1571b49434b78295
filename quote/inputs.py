"""
Financial configuration module.
Holds the fixed quote assumptions, loads JSON overrides with defaults and audit trail.
"""

import json
from dataclasses import dataclass, field, fields
from typing import Dict, Any, List, Optional, Tuple


TAX_BENEFIT_POLICIES = ('year_one', 'spread')


@dataclass(frozen=True)
class FinancialConfig:
    """Immutable set of constants used to size and price a quote."""

    # Sizing
    loss_factor: float = 1.2
    sun_hours: float = 4.2
    days_per_month: int = 30
    performance_ratio: float = 0.81
    panel_watts: float = 645.0
    inverter_kw: float = 1.25

    # Cost
    cost_per_kw: float = 3550000.0
    tax_benefit_fraction: float = 0.5
    payment_split: Tuple[float, ...] = (0.30, 0.20, 0.40, 0.10)

    # Projection
    horizon_years: int = 25
    discount_rate: float = 0.12
    degradation_rate: float = 0.005
    om_rate: float = 0.01
    savings_capture_rate: float = 0.9
    tax_benefit_policy: str = 'year_one'
    tax_benefit_spread_years: int = 5

    # Solver
    irr_initial_guess: float = 0.1

    # Locale
    timezone: str = 'America/Bogota'
    date_format: str = '%d/%m/%Y'

    # Pre-computed spreadsheet results
    sheet_results_key: str = 'RESULTADOS'
    sheet_cells: Dict[str, str] = field(default_factory=dict)


class ConfigValidator:
    """Validates config overrides with defaults and audit tracking."""

    def __init__(self):
        self.defaults_used = []
        self.validation_errors = []
        self.warnings = []

    def load_and_validate(self, json_path: Optional[str] = None) -> FinancialConfig:
        """Load JSON overrides (if any), fill defaults and validate."""
        data = {}
        if json_path:
            with open(json_path, 'r', encoding='utf-8') as f:
                data = json.load(f)

        return self.build(data)

    def build(self, data: Dict[str, Any]) -> FinancialConfig:
        """Build a config from an overrides mapping."""
        known = {f.name: f for f in fields(FinancialConfig)}
        values = {}

        for key in data:
            if key not in known:
                self.warnings.append(f"Unknown config key ignored: {key}")

        defaults = FinancialConfig()
        for name in known:
            if name in data and data[name] is not None:
                values[name] = data[name]
            else:
                self.defaults_used.append(f"{name} = {getattr(defaults, name)}")

        if 'payment_split' in values:
            values['payment_split'] = tuple(values['payment_split'])
        if 'sheet_cells' in values:
            values['sheet_cells'] = dict(values['sheet_cells'])

        config = FinancialConfig(**values)
        self._validate(config)

        if self.validation_errors:
            raise ValueError(f"Config validation failed: {self.validation_errors}")

        return config

    def _validate(self, config: FinancialConfig):
        """Validate config constraints."""
        if config.tax_benefit_policy not in TAX_BENEFIT_POLICIES:
            self.validation_errors.append(f"Invalid tax_benefit_policy: {config.tax_benefit_policy}")

        for name in ('degradation_rate', 'om_rate', 'tax_benefit_fraction'):
            rate = getattr(config, name)
            if not 0 <= rate < 1:
                self.validation_errors.append(f"{name} must be in [0, 1)")

        if not 0 < config.savings_capture_rate <= 1:
            self.validation_errors.append("savings_capture_rate must be in (0, 1]")
        if config.discount_rate <= -1:
            self.validation_errors.append("discount_rate must be > -1")

        for name in ('horizon_years', 'tax_benefit_spread_years', 'days_per_month'):
            if getattr(config, name) <= 0:
                self.validation_errors.append(f"{name} must be > 0")

        for name in ('sun_hours', 'performance_ratio', 'panel_watts', 'inverter_kw', 'cost_per_kw'):
            if getattr(config, name) <= 0:
                self.validation_errors.append(f"{name} must be > 0")

        if len(config.payment_split) != 4:
            self.validation_errors.append("payment_split must have exactly 4 shares")
        elif abs(sum(config.payment_split) - 1.0) > 1e-9:
            self.warnings.append(f"payment_split sums to {sum(config.payment_split):.4f}, not 1")


def load_config(json_path: Optional[str] = None) -> Tuple[FinancialConfig, List[str], List[str]]:
    """
    Load and validate the financial config.

    Returns:
        (config, defaults_used, warnings)
    """
    validator = ConfigValidator()
    config = validator.load_and_validate(json_path)
    return config, validator.defaults_used, validator.warnings
