"""
Shared utilities for VITAE.

Common functionality used across contexts:
- Logger setup with provenance
- Text normalization helpers
- Timestamps for log directories
"""

from vitae.utils.timestamp import now

__all__ = ["now"]
