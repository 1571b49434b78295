"""Unit tests for financial config loading."""

import unittest
import sys
import os
import json
import tempfile
from dataclasses import FrozenInstanceError

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quote.inputs import FinancialConfig, ConfigValidator, load_config


class TestLoadConfig(unittest.TestCase):
    """Test defaults, overrides and validation."""

    def test_defaults_without_file(self):
        config, defaults_used, warnings = load_config()

        self.assertEqual(config, FinancialConfig())
        self.assertIn('discount_rate = 0.12', defaults_used)
        self.assertEqual(warnings, [])

    def test_overrides_from_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'config.json')
            with open(path, 'w', encoding='utf-8') as f:
                json.dump({'discount_rate': 0.1, 'tax_benefit_policy': 'spread',
                           'payment_split': [0.5, 0.5, 0.0, 0.0]}, f)

            config, defaults_used, _ = load_config(path)

        self.assertEqual(config.discount_rate, 0.1)
        self.assertEqual(config.tax_benefit_policy, 'spread')
        self.assertEqual(config.payment_split, (0.5, 0.5, 0.0, 0.0))
        self.assertNotIn('discount_rate = 0.12', defaults_used)

    def test_invalid_policy_raises(self):
        with self.assertRaises(ValueError):
            ConfigValidator().build({'tax_benefit_policy': 'never'})

    def test_invalid_rates_raise(self):
        with self.assertRaises(ValueError) as ctx:
            ConfigValidator().build({'degradation_rate': 1.5, 'horizon_years': 0})
        self.assertIn('degradation_rate', str(ctx.exception))
        self.assertIn('horizon_years', str(ctx.exception))

    def test_payment_split_warnings(self):
        validator = ConfigValidator()
        validator.build({'payment_split': [0.5, 0.5, 0.1, 0.1], 'colour': 'red'})

        self.assertEqual(len(validator.warnings), 2)

    def test_payment_split_length(self):
        with self.assertRaises(ValueError):
            ConfigValidator().build({'payment_split': [0.5, 0.5]})

    def test_config_is_immutable(self):
        config = FinancialConfig()
        with self.assertRaises(FrozenInstanceError):
            config.discount_rate = 0.5


if __name__ == '__main__':
    unittest.main()
