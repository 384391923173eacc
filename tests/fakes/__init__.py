"""Shared test doubles and sample payroll files."""

from __future__ import annotations

from nomina.persistence.memory_backend import MemoryBatchStore

FULL_BATCH = (
    "E|101202123|BHD|15/03/2024|50000.00|CTA001\n"
    "D|00112345678|a@x.com|ACC1|25000.00\n"
    "D|00198765432||ACC2|25000.00\n"
    "S|2"
)

HEADER_ONLY = "E|101202123|BHD|15/03/2024|50000.00|CTA001\n"

NO_HEADER = (
    "D|00112345678|a@x.com|ACC1|25000.00\n"
    "S|1\n"
)

__all__ = ["FULL_BATCH", "HEADER_ONLY", "MemoryBatchStore", "NO_HEADER"]
