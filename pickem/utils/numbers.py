"""
Helpers numéricos compartidos por el grader, las estadísticas y el ranking.

Las líneas de apuestas llegan del feed como números o como texto formateado
("-3.5", "O 47", "+7"). Cualquier cosa que no se pueda leer se trata como
ausente (None), nunca como 0.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)")

_TENTH = Decimal("0.1")


def parse_line(value: Any) -> Optional[float]:
    """
    Extract a spread/total line from a raw value.

    Returns None for None, booleans, non-finite numbers and strings without
    a number in them.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else None

    match = _NUMBER_RE.search(str(value))
    if not match:
        return None

    number = float(match.group(0))
    return number if math.isfinite(number) else None


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are not NaN or infinite."""
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float, places: str = "0.1") -> float:
    """Round with half-up semantics (66.65 -> 66.7), not banker's rounding."""
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def percentage(numerator: int, denominator: int) -> float:
    """
    Percentage with one decimal place.

    A zero denominator yields 0.0.
    """
    if denominator <= 0:
        return 0.0
    ratio = Decimal(numerator) * 100 / Decimal(denominator)
    return float(ratio.quantize(_TENTH, rounding=ROUND_HALF_UP))
