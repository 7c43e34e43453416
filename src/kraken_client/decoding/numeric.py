"""
Decimal-string coercion for wire numeric fields.

Kraken sends prices, volumes and balances as JSON strings ("30000.10000").
The annotated types below plug into the pydantic payload models; a value
that will not parse raises ValueError, which pydantic reports against the
field's location and the decoder turns into FormatError.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

# Plain decimal text only; rejects Python literal forms such as "1_000"
DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def coerce_decimal(value: Any) -> float:
    """Parse a decimal string (or plain JSON number) into a finite float."""
    if isinstance(value, bool):
        raise ValueError(f"expected a decimal string, got boolean {value!r}")
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("expected a decimal string, got an empty string")
        if not DECIMAL_RE.match(text):
            raise ValueError(f"not a decimal number: {value!r}")
        out = float(text)
    else:
        raise ValueError(f"expected a decimal string, got {type(value).__name__}")

    if not math.isfinite(out):
        raise ValueError(f"not a finite number: {value!r}")
    return out


def coerce_optional_decimal(value: Any) -> Optional[float]:
    """Like coerce_decimal, but JSON null means "not provided"."""
    if value is None:
        return None
    return coerce_decimal(value)


DecimalStr = Annotated[float, BeforeValidator(coerce_decimal)]
OptionalDecimalStr = Annotated[Optional[float], BeforeValidator(coerce_optional_decimal)]


def format_decimal(value: Optional[float]) -> str:
    """Render a decoded value back to decimal text; None renders as "-"."""
    if value is None:
        return "-"
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
