# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Visa catalog: immutable registry of categories, criteria and rule parameters.

Built once per process. Lookups of identifiers outside the closed set return an
explicit not-found result (reason_code UNKNOWN_CATEGORY), never an empty list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from petitionops.core.catalog.models import (
    AllRequiredRule,
    CategoryDefinition,
    Criterion,
    Residency,
    Strength,
    ThresholdRule,
    VisaCategory,
)

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"

# Threshold shared by EB-1A and O-1 (3 of N evidentiary criteria)
EXTRAORDINARY_ABILITY_MIN_CRITERIA = 3


class UnknownCategoryError(KeyError):
    """Raised by VisaCatalog.require for identifiers outside the catalog."""

    def __init__(self, category_id: object) -> None:
        self.category_id = category_id
        self.reason_code = UNKNOWN_CATEGORY
        super().__init__(f"Unknown visa category: {category_id!r}")


@dataclass(frozen=True)
class CatalogLookup:
    """Result of VisaCatalog.lookup. definition is None when not found."""

    requested: str
    definition: Optional[CategoryDefinition] = None
    reason_code: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.definition is not None


EB1A_CRITERIA: Tuple[Criterion, ...] = (
    Criterion(
        "major-awards",
        "Receipt of major internationally recognized awards",
        "Nobel Prize, Pulitzer Prize, Olympic medals, or similar major awards",
        strength=Strength.HIGH,
    ),
    Criterion(
        "membership",
        "Membership in associations requiring outstanding achievements",
        "Membership that requires outstanding achievements as judged by experts",
    ),
    Criterion(
        "media-coverage",
        "Published material about you in major media",
        "Articles, books, or other published material about your work",
        strength=Strength.HIGH,
    ),
    Criterion(
        "judging",
        "Judging the work of others in your field",
        "Serving as a judge or reviewer of others' work",
    ),
    Criterion(
        "original-contributions",
        "Original contributions of major significance",
        "Patents, innovations, or original research with significant impact",
        strength=Strength.HIGH,
    ),
    Criterion(
        "scholarly-articles",
        "Scholarly articles you have authored",
        "Publications in professional journals or major trade publications",
    ),
    Criterion(
        "artistic-exhibitions",
        "Display of work at artistic exhibitions",
        "Solo or group exhibitions in galleries or museums",
    ),
    Criterion(
        "leading-role",
        "Leading or critical role in distinguished organizations",
        "Leadership position in organizations with distinguished reputation",
    ),
    Criterion(
        "high-salary",
        "High salary compared to others in the field",
        "Evidence of high remuneration relative to others in your field",
        strength=Strength.LOW,
    ),
    Criterion(
        "commercial-success",
        "Commercial success in performing arts",
        "Box office receipts, record sales, or similar commercial indicators",
    ),
)

EB2_NIW_CRITERIA: Tuple[Criterion, ...] = (
    Criterion(
        "advanced-degree",
        "Advanced degree",
        "Master's degree or higher, or bachelor's plus 5 years experience",
        required=True,
        strength=Strength.HIGH,
    ),
    Criterion(
        "exceptional-ability",
        "Exceptional ability",
        "Degree of expertise significantly above that ordinarily encountered",
        strength=Strength.HIGH,
    ),
    Criterion(
        "substantial-merit",
        "Substantial merit and national importance",
        "Work has substantial merit and national importance to the US",
        required=True,
        strength=Strength.HIGH,
    ),
    Criterion(
        "well-positioned",
        "Well positioned to advance the endeavor",
        "You are well positioned to advance the proposed endeavor",
        required=True,
        strength=Strength.HIGH,
    ),
    Criterion(
        "beneficial",
        "Beneficial to waive job offer requirement",
        "It would be beneficial to the US to waive the job offer requirement",
        required=True,
        strength=Strength.HIGH,
    ),
)

O1_CRITERIA: Tuple[Criterion, ...] = (
    Criterion(
        "major-awards-o1",
        "Receipt of major awards or prizes",
        "Major awards or prizes for excellence in your field",
        strength=Strength.HIGH,
    ),
    Criterion(
        "membership-o1",
        "Membership in associations requiring outstanding achievements",
        "Membership requiring outstanding achievements as judged by experts",
    ),
    Criterion(
        "published-material-o1",
        "Published material about you",
        "Articles or other published material about you and your work",
        strength=Strength.HIGH,
    ),
    Criterion(
        "judging-o1",
        "Judging the work of others",
        "Participation as a judge of others' work in your field",
    ),
    Criterion(
        "original-contributions-o1",
        "Original contributions of major significance",
        "Original scientific, scholarly, or business-related contributions",
        strength=Strength.HIGH,
    ),
    Criterion(
        "scholarly-articles-o1",
        "Scholarly articles you have authored",
        "Publications in professional journals or major trade publications",
    ),
    Criterion(
        "leading-role-o1",
        "Leading or critical role in distinguished organizations",
        "Leadership position in organizations with distinguished reputation",
    ),
    Criterion(
        "high-remuneration",
        "High salary or remuneration",
        "Evidence of high salary or other remuneration for your services",
        strength=Strength.LOW,
    ),
)


DEFAULT_DEFINITIONS: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        category=VisaCategory.EB1A,
        title="Extraordinary Ability",
        criteria=EB1A_CRITERIA,
        rule=ThresholdRule(min_optional=EXTRAORDINARY_ABILITY_MIN_CRITERIA),
        description="For individuals with extraordinary ability in sciences, arts, education, business, or athletics",
        processing_time="8-16 months",
        key_requirements=(
            "Must meet 3 out of 10 criteria",
            "Evidence of sustained national or international acclaim",
            "Recognition of achievements in the field",
        ),
    ),
    CategoryDefinition(
        category=VisaCategory.EB2_NIW,
        title="National Interest Waiver",
        criteria=EB2_NIW_CRITERIA,
        rule=AllRequiredRule(),
        description="For professionals whose work is in the national interest of the United States",
        processing_time="12-24 months",
        key_requirements=(
            "Advanced degree or exceptional ability",
            "Work must be in the national interest",
            "Must satisfy the Matter of Dhanasar test",
        ),
    ),
    CategoryDefinition(
        category=VisaCategory.O1,
        title="Extraordinary Ability (Temporary)",
        criteria=O1_CRITERIA,
        rule=ThresholdRule(min_optional=EXTRAORDINARY_ABILITY_MIN_CRITERIA),
        description="Temporary visa for individuals with extraordinary ability or achievement",
        processing_time="2-4 months",
        key_requirements=(
            "Must meet 3 out of 8 criteria",
            "Sustained national or international recognition",
            "Temporary nature (renewable)",
        ),
        residency=Residency.TEMPORARY,
    ),
)


class VisaCatalog:
    """Read-only mapping VisaCategory -> CategoryDefinition, in registration order."""

    def __init__(self, definitions: Tuple[CategoryDefinition, ...] = DEFAULT_DEFINITIONS) -> None:
        entries: Dict[VisaCategory, CategoryDefinition] = {}
        for d in definitions:
            if d.category in entries:
                raise ValueError(f"Duplicate catalog entry for {d.category.value}")
            ids = d.criterion_ids()
            if len(set(ids)) != len(ids):
                raise ValueError(f"Duplicate criterion id in {d.category.value}")
            entries[d.category] = d
        self._entries: Mapping[VisaCategory, CategoryDefinition] = MappingProxyType(entries)

    def __iter__(self) -> Iterator[CategoryDefinition]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, category_id: object) -> bool:
        if not isinstance(category_id, (str, VisaCategory)):
            return False
        return self.lookup(category_id).found

    def categories(self) -> Tuple[VisaCategory, ...]:
        return tuple(self._entries.keys())

    def lookup(self, category_id: Union[VisaCategory, str]) -> CatalogLookup:
        """Resolve category_id. Unknown ids -> CatalogLookup(found=False, reason_code=UNKNOWN_CATEGORY)."""
        requested = category_id.value if isinstance(category_id, VisaCategory) else str(category_id)
        member = VisaCategory.parse(category_id)
        definition = self._entries.get(member) if member is not None else None
        if definition is None:
            logger.warning("[CATALOG] Unknown visa category requested: %r", requested)
            return CatalogLookup(requested=requested, reason_code=UNKNOWN_CATEGORY)
        return CatalogLookup(requested=requested, definition=definition)

    def require(self, category_id: Union[VisaCategory, str]) -> CategoryDefinition:
        """Like lookup, but raises UnknownCategoryError when not found."""
        result = self.lookup(category_id)
        if result.definition is None:
            raise UnknownCategoryError(category_id)
        return result.definition


_DEFAULT_CATALOG: Optional[VisaCatalog] = None


def get_catalog() -> VisaCatalog:
    """Process-wide catalog built from DEFAULT_DEFINITIONS."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = VisaCatalog()
    return _DEFAULT_CATALOG


__all__ = [
    "CatalogLookup",
    "DEFAULT_DEFINITIONS",
    "EXTRAORDINARY_ABILITY_MIN_CRITERIA",
    "UNKNOWN_CATEGORY",
    "UnknownCategoryError",
    "VisaCatalog",
    "get_catalog",
]
