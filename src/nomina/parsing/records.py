"""Build typed records from tokenized lines, dispatching on the line tag."""

from __future__ import annotations

import logging
from typing import Callable, Union

from nomina.core.exceptions import ParseError
from nomina.core.types import Fields
from nomina.models.batch import DetailRecord, HeaderRecord, RecordTag, SummaryRecord
from nomina.parsing.dates import to_iso_date
from nomina.parsing.numbers import parse_amount, parse_count
from nomina.parsing.tokenizer import Line

logger = logging.getLogger(__name__)

Record = Union[HeaderRecord, DetailRecord, SummaryRecord]

# Field count per tag, tag included.
FIELD_COUNTS: dict[RecordTag, int] = {
    RecordTag.HEADER: 6,
    RecordTag.DETAIL: 5,
    RecordTag.SUMMARY: 2,
}


def _field(fields: Fields, index: int) -> str | None:
    return fields[index] if index < len(fields) else None


def build_header(fields: Fields, strict: bool = False) -> HeaderRecord:
    # E|RNC|BANK|DD/MM/YYYY|TOTAL|ORIGIN_ACCOUNT
    return HeaderRecord(
        company_tax_id=_field(fields, 1),
        destination_bank=_field(fields, 2),
        payment_date=to_iso_date(_field(fields, 3), strict),
        total_amount=parse_amount(_field(fields, 4), strict),
        origin_account=_field(fields, 5),
    )


def build_detail(fields: Fields, strict: bool = False) -> DetailRecord:
    # D|NATIONAL_ID|EMAIL|BANK_ACCOUNT|AMOUNT
    email = _field(fields, 2)
    return DetailRecord(
        national_id=_field(fields, 1),
        email=email if email else None,
        bank_account=_field(fields, 3),
        amount=parse_amount(_field(fields, 4), strict),
    )


def build_summary(fields: Fields, strict: bool = False) -> SummaryRecord:
    # S|COUNT
    return SummaryRecord(declared_count=parse_count(_field(fields, 1), strict))


_BUILDERS: dict[RecordTag, Callable[[Fields, bool], Record]] = {
    RecordTag.HEADER: build_header,
    RecordTag.DETAIL: build_detail,
    RecordTag.SUMMARY: build_summary,
}


def classify(line: Line, strict: bool = False) -> Record | None:
    """Build the record for a line, or None when its tag is not recognized.

    Raises:
        ParseError: If a recognized line cannot be built. In lenient mode this
            only happens when the header has no date field at all.
    """
    try:
        tag = RecordTag(line.tag)
    except ValueError:
        logger.debug("Ignoring line %d with unknown tag %r", line.number, line.tag)
        return None

    if strict and len(line.fields) < FIELD_COUNTS[tag]:
        raise ParseError(
            f"{tag.name.lower()} record expects {FIELD_COUNTS[tag]} fields, got {len(line.fields)}",
            line.number,
        )

    try:
        return _BUILDERS[tag](line.fields, strict)
    except ValueError as exc:
        raise ParseError(str(exc), line.number) from exc
