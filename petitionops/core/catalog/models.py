# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Catalog models: visa categories, criteria, eligibility rule variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class VisaCategory(str, Enum):
    """Supported self-petition classifications. Closed set."""

    EB1A = "EB-1A"
    EB2_NIW = "EB-2 NIW"
    O1 = "O-1"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Union["VisaCategory", str, None]) -> Optional["VisaCategory"]:
        """Return the member for raw (member or value, whitespace/case tolerant), else None."""
        if isinstance(raw, VisaCategory):
            return raw
        if raw is None:
            return None
        key = str(raw).strip().upper()
        for member in cls:
            if member.value.upper() == key:
                return member
        return None


class Strength(str, Enum):
    """Display weighting only. Never used in eligibility arithmetic."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __str__(self) -> str:
        return self.value


class Residency(str, Enum):
    PERMANENT = "Permanent"
    TEMPORARY = "Temporary"


@dataclass(frozen=True)
class Criterion:
    """A single type of evidence an applicant can claim."""

    id: str
    title: str
    description: str
    required: bool = False
    strength: Strength = Strength.MEDIUM

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "required": self.required,
            "strength": self.strength.value,
        }


@dataclass(frozen=True)
class ThresholdRule:
    """Eligible when at least min_optional optional criteria are selected."""

    min_optional: int
    kind: str = field(default="THRESHOLD", init=False)

    def min_required(self, total_required: int) -> int:
        return self.min_optional

    def is_satisfied(self, selected_required: int, total_required: int, selected_optional: int) -> bool:
        return selected_optional >= self.min_optional


@dataclass(frozen=True)
class AllRequiredRule:
    """Eligible only when every required criterion is selected.

    The evaluator treats a category under this rule with no required criteria
    as degenerate (never eligible).
    """

    kind: str = field(default="ALL_REQUIRED", init=False)

    def min_required(self, total_required: int) -> int:
        return total_required

    def is_satisfied(self, selected_required: int, total_required: int, selected_optional: int) -> bool:
        return selected_required == total_required


EligibilityRule = Union[ThresholdRule, AllRequiredRule]


@dataclass(frozen=True)
class CategoryDefinition:
    """One catalog entry: ordered criteria plus the rule that judges them."""

    category: VisaCategory
    title: str
    criteria: Tuple[Criterion, ...]
    rule: EligibilityRule
    description: str = ""
    processing_time: str = ""
    key_requirements: Tuple[str, ...] = ()
    residency: Residency = Residency.PERMANENT

    @property
    def required_criteria(self) -> Tuple[Criterion, ...]:
        return tuple(c for c in self.criteria if c.required)

    @property
    def optional_criteria(self) -> Tuple[Criterion, ...]:
        return tuple(c for c in self.criteria if not c.required)

    @property
    def min_required(self) -> int:
        """Optional threshold for threshold rules; count of required criteria for all-required."""
        return self.rule.min_required(len(self.required_criteria))

    def criterion_ids(self) -> Tuple[str, ...]:
        return tuple(c.id for c in self.criteria)

    def get_criterion(self, criterion_id: str) -> Optional[Criterion]:
        for c in self.criteria:
            if c.id == criterion_id:
                return c
        return None

    def summary_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "processing_time": self.processing_time,
            "residency": self.residency.value,
            "rule": self.rule.kind,
            "min_required": self.min_required,
            "criteria_count": len(self.criteria),
        }

    def to_dict(self) -> Dict[str, Any]:
        out = self.summary_dict()
        out["key_requirements"] = list(self.key_requirements)
        out["required_criteria"] = [c.to_dict() for c in self.required_criteria]
        out["optional_criteria"] = [c.to_dict() for c in self.optional_criteria]
        return out
