# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""JSON-LD assembly and structural validation."""

from __future__ import annotations

from .assembler import assemble
from .validator import ValidationResult, validate

__all__ = ["ValidationResult", "assemble", "validate"]
