"""Assemble classified records into a single batch."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from nomina.core.exceptions import NominaError, ParseError, ValidationError
from nomina.models.batch import DetailRecord, HeaderRecord, ParsedBatch, SummaryRecord
from nomina.parsing.records import Record, classify
from nomina.parsing.tokenizer import tokenize

logger = logging.getLogger(__name__)


def assemble(records: Iterable[Record | None]) -> ParsedBatch:
    """Collect the last header, every detail in order and the last summary.

    Raises:
        ValidationError: If no header record was produced.
    """
    header: Optional[HeaderRecord] = None
    details: list[DetailRecord] = []
    summary: Optional[SummaryRecord] = None

    for record in records:
        if isinstance(record, HeaderRecord):
            header = record
        elif isinstance(record, DetailRecord):
            details.append(record)
        elif isinstance(record, SummaryRecord):
            summary = record

    if header is None:
        raise ValidationError("header not found")

    return ParsedBatch(header=header, details=details, summary=summary)


def parse_batch(content: str, strict: bool = False) -> ParsedBatch:
    """Parse a whole payroll file into a batch.

    Raises:
        ValidationError: If the file has no header line.
        ParseError: For any other failure while reading the content.
    """
    try:
        batch = assemble(classify(line, strict) for line in tokenize(content))
    except NominaError:
        raise
    except Exception as exc:
        raise ParseError(f"unexpected content: {exc}") from exc

    logger.debug(
        "Parsed batch: %d details, summary=%s",
        len(batch.details), batch.summary is not None,
    )
    return batch
