"""Errors that abort a braindump run.

Everything recoverable (bad records, unreadable files, broken rows) is logged
and skipped by the readers instead of raising.
"""
from __future__ import annotations


class BraindumpError(Exception):
    """Base class for fatal braindump errors."""


class ConfigurationError(BraindumpError):
    """The runtime environment cannot be resolved (e.g. no home directory)."""
