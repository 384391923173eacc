"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from nomina.core.config import AppSettings
from nomina.persistence.mysql_backend import MySQLBatchStore


def create_persistence(settings: AppSettings | None = None) -> MySQLBatchStore:
    """Create the batch store from application settings."""
    if settings is None:
        settings = AppSettings()

    return MySQLBatchStore(settings.mysql)
