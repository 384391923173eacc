"""Payment date normalization from dd/mm/yyyy to YYYY-MM-DD."""

from __future__ import annotations

from datetime import date


def to_iso_date(raw: str | None, strict: bool = False) -> str:
    """Convert ``D/M/Y`` into ``YYYY-MM-DD`` with a zero-padded day and month.

    The calendar is not checked in lenient mode: ``31/02/2024`` becomes
    ``2024-02-31``. Missing components are left empty and extra ones ignored,
    so a malformed date yields a malformed string rather than an error.

    Args:
        raw: Date text as found in the header line.
        strict: Require exactly three numeric components forming a real date.

    Raises:
        ValueError: If the date field is missing, or in strict mode when the
            value is not a valid calendar date.
    """
    if raw is None:
        raise ValueError("missing payment date")

    parts = [part.strip() for part in raw.split("/")]

    if strict:
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            raise ValueError(f"invalid payment date {raw!r}")
        day, month, year = (int(part) for part in parts)
        try:
            return date(year, month, day).isoformat()
        except ValueError as exc:
            raise ValueError(f"invalid payment date {raw!r}: {exc}") from exc

    day, month, year = (parts + ["", ""])[:3]
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
