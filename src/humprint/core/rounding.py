"""Half-up rounding shared by the extractors."""

import math


def round_half_up(value: float, decimals: int = 0) -> float:
    """
    Round to ``decimals`` places with ties going up (towards +inf).

    The value is scaled, floored after adding one half, and scaled back, so
    62.5 -> 63 and 551.25 -> 551.3 where the built-in ``round`` would give
    62 and 551.2.

    Args:
        value: Number to round.
        decimals: Decimal places to keep.

    Returns:
        Rounded value as a float.
    """
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale
