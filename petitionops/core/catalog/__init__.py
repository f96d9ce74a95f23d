# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Visa catalog: categories, criteria and eligibility rule variants."""

from petitionops.core.catalog.models import (
    AllRequiredRule,
    CategoryDefinition,
    Criterion,
    EligibilityRule,
    Residency,
    Strength,
    ThresholdRule,
    VisaCategory,
)
from petitionops.core.catalog.registry import (
    UNKNOWN_CATEGORY,
    CatalogLookup,
    UnknownCategoryError,
    VisaCatalog,
    get_catalog,
)

__all__ = [
    "AllRequiredRule",
    "CatalogLookup",
    "CategoryDefinition",
    "Criterion",
    "EligibilityRule",
    "Residency",
    "Strength",
    "ThresholdRule",
    "UNKNOWN_CATEGORY",
    "UnknownCategoryError",
    "VisaCatalog",
    "VisaCategory",
    "get_catalog",
]
