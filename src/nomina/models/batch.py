"""Batch records parsed from a payroll disbursement file.

A file carries one header line (``E``), any number of detail lines (``D``)
and an optional summary line (``S``). Amounts are floats so that unparseable
values can flow through as NaN, matching the lenient upload format.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from nomina.core.types import BatchId


class RecordTag(StrEnum):
    HEADER = "E"  # Encabezado
    DETAIL = "D"
    SUMMARY = "S"


class HeaderRecord(BaseModel):
    """Batch header: paying company, bank and totals."""

    company_tax_id: Optional[str] = None  # RNC
    destination_bank: Optional[str] = None
    payment_date: str  # YYYY-MM-DD
    total_amount: float
    origin_account: Optional[str] = None


class DetailRecord(BaseModel):
    """One payee disbursement line."""

    national_id: Optional[str] = None  # Cedula
    email: Optional[str] = None  # None when the source field is empty
    bank_account: Optional[str] = None
    amount: float


class SummaryRecord(BaseModel):
    """Trailer declaring how many detail records the batch carries."""

    declared_count: int | float  # NaN when the source is not numeric


class ParsedBatch(BaseModel):
    """Header, details and optional summary assembled from one file."""

    header: HeaderRecord
    details: list[DetailRecord] = Field(default_factory=list)
    summary: Optional[SummaryRecord] = None

    @property
    def record_count(self) -> int | float:
        """Declared count when a summary exists, otherwise the detail count."""
        if self.summary is not None:
            return self.summary.declared_count
        return len(self.details)


class InsertResult(BaseModel):
    """Outcome of a successful two-phase insert."""

    batch_id: BatchId
    inserted_count: int = 0
