"""Type aliases used across the nomina service."""

from __future__ import annotations

BatchId = int
Fields = list[str]
