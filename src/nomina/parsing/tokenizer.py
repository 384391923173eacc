"""Split upload content into pipe-delimited lines."""

from __future__ import annotations

from typing import Iterator, NamedTuple

from nomina.core.types import Fields

FIELD_SEPARATOR = "|"


class Line(NamedTuple):
    """A non-blank source line with its 1-based position in the file."""

    number: int
    fields: Fields

    @property
    def tag(self) -> str:
        return self.fields[0]


def tokenize(content: str) -> Iterator[Line]:
    """Yield trimmed, non-empty lines split into trimmed fields."""
    for number, raw in enumerate(content.split("\n"), start=1):
        text = raw.strip()
        if not text:
            continue
        yield Line(number, [field.strip() for field in text.split(FIELD_SEPARATOR)])
