# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""PetitionOps: self-petition visa eligibility engine."""

__version__ = "0.1.0"
