# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Percentage helper shared by eligibility progress and document completion.

Carries no visa knowledge. A non-positive denominator yields 0, never a
division error; the result is always clamped to [0, 100].
"""

from __future__ import annotations

from typing import Union

Number = Union[int, float]

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0


def percent(numerator: Number, denominator: Number) -> float:
    """Return numerator / denominator as a percentage clamped to [0, 100]."""
    if denominator <= 0:
        return PERCENT_MIN
    raw = (numerator / denominator) * 100.0
    return max(PERCENT_MIN, min(PERCENT_MAX, raw))


__all__ = ["percent", "PERCENT_MIN", "PERCENT_MAX"]
