"""
Shared validation and rounding helpers
"""

import math
from typing import Any
from core.exceptions import InvalidIdentifierError


def parse_assessment_id(raw: Any) -> int:
    """
    Validate an assessment identifier supplied by a caller.
    
    Accepts positive integers and strings of ASCII digits (surrounding
    whitespace is ignored). Anything else raises InvalidIdentifierError.
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidIdentifierError(
            "Valid assessment ID is required",
            context={"raw_value": raw}
        )
    
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        # isdigit() alone also accepts superscripts and other non-ASCII digits
        value = int(raw.strip())
    else:
        raise InvalidIdentifierError(
            "Valid assessment ID is required",
            context={"raw_value": raw}
        )
    
    if value <= 0:
        raise InvalidIdentifierError(
            "Assessment ID must be a positive integer",
            context={"raw_value": raw}
        )
    
    return value


def round_half_up(value: float, places: int) -> float:
    """Round half up to `places` decimals (0.125 -> 0.13, where round() gives 0.12)"""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor
