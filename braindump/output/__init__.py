"""Envelope and summary writers."""

from braindump.output.summary import write_summary
from braindump.output.writer import build_envelope, write_envelope

__all__ = ["build_envelope", "write_envelope", "write_summary"]
