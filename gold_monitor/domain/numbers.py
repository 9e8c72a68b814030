"""
Lenient numeric parsing shared by the exchange normalizers and the chart-context sanitizer.
"""

import math
from typing import Any, Optional


def parse_finite(value: Any) -> Optional[float]:
    """Return *value* as a finite float, or None when it is not one.

    Numbers and numeric strings parse. Empty strings, None, booleans, NaN,
    infinities and any other type are treated as absent rather than zero.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            number = float(text)
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None
