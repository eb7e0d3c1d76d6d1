# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""SchemaPilot exception hierarchy.

The classification/policy/assembly/validation stages are total and never
raise.  These errors belong to the edges of the pipeline: request
validation, the content fetcher and HTML normalization.
"""

from __future__ import annotations


class SchemaPilotError(Exception):
    """Base exception for all SchemaPilot errors."""


class InvalidInputError(SchemaPilotError):
    """Request rejected before the pipeline ran (missing or malformed URL, bad option)."""

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class FetchError(SchemaPilotError):
    """The content fetcher could not produce normalized content."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class NormalizationError(SchemaPilotError):
    """Raw HTML could not be parsed into normalized content."""
