"""
Typed read-only view over a raw quote request.
"""

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Any

from .formatting import parse_number, is_missing


class QuoteInput:
    """
    Request fields split into named scalars and spreadsheet results.

    The raw mapping is never mutated. Nested mappings other than the sheet
    results are ignored.
    """

    def __init__(self, raw: Mapping = None, sheet_results_key: str = 'RESULTADOS'):
        raw = raw or {}
        scalars = {}
        sheet = {}

        for key, value in raw.items():
            if isinstance(value, Mapping):
                if key == sheet_results_key:
                    sheet.update({str(ref): cell for ref, cell in value.items()})
                continue
            scalars[str(key)] = value

        self._fields = MappingProxyType(scalars)
        self._sheet = MappingProxyType(sheet)

    @property
    def fields(self) -> Mapping:
        return self._fields

    @property
    def sheet_results(self) -> Mapping:
        return self._sheet

    def has(self, name: str) -> bool:
        """True when the field was supplied with a non-blank value."""
        return name in self._fields and not is_missing(self._fields[name])

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def number(self, name: str) -> float:
        """Numeric value of a field, NaN when absent or unparsable."""
        return parse_number(self._fields.get(name))

    def sheet_number(self, ref: str) -> float:
        """Numeric value of a spreadsheet cell like 'Flujo!C30', NaN when absent."""
        return parse_number(self._sheet.get(ref))

    def as_strings(self) -> Dict[str, str]:
        """Supplied scalar fields as strings (None becomes '')."""
        out = {}
        for key, value in self._fields.items():
            if value is None or (isinstance(value, float) and math.isnan(value)):
                out[key] = ''
            elif isinstance(value, float) and value.is_integer():
                out[key] = str(int(value))
            else:
                out[key] = str(value)
        return out
