from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 0) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(count: int, total: int) -> str:
    """``count/total`` as a whole percentage string; ``0%`` when total is 0."""
    if total <= 0:
        return "0%"
    return f"{int(round_half_up(count / total * 100))}%"


def initials(first_name: str, last_name: str) -> str:
    return f"{(first_name or ' ')[0]}{(last_name or ' ')[0]}".strip().upper()
