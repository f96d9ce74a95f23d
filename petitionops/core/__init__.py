# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
