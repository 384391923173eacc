"""Integration test fixtures — a reachable MySQL server."""

from __future__ import annotations

import os

import mysql.connector
import pytest

from nomina.core.config import MySQLConfig

TABLE_SUFFIX = "_inttest"

MYSQL_CONFIG = MySQLConfig(
    host=os.environ.get("NOMINA_TEST_MYSQL_HOST", "localhost"),
    port=int(os.environ.get("NOMINA_TEST_MYSQL_PORT", "3306")),
    user=os.environ.get("NOMINA_TEST_MYSQL_USER", "root"),
    password=os.environ.get("NOMINA_TEST_MYSQL_PASSWORD", ""),
    database=os.environ.get("NOMINA_TEST_MYSQL_DATABASE", "nomina"),
    batch_table=f"nomina{TABLE_SUFFIX}",
    detail_table=f"detalle{TABLE_SUFFIX}",
    timeout=5,
)


def _mysql_available() -> bool:
    """Check if MySQL is reachable."""
    try:
        mysql.connector.connect(**MYSQL_CONFIG.connect_kwargs()).close()
        return True
    except Exception:
        return False


skip_no_mysql = pytest.mark.skipif(
    not _mysql_available(),
    reason="MySQL not available",
)


@pytest.fixture
def mysql_tables():
    """Create empty batch and detail tables, dropped after the test."""
    batch, detail = MYSQL_CONFIG.batch_table, MYSQL_CONFIG.detail_table
    conn = mysql.connector.connect(autocommit=True, **MYSQL_CONFIG.connect_kwargs())
    cursor = conn.cursor()
    cursor.execute(f"DROP TABLE IF EXISTS {detail}")
    cursor.execute(f"DROP TABLE IF EXISTS {batch}")
    cursor.execute(
        f"CREATE TABLE {batch} ("
        " id_nomina INT AUTO_INCREMENT PRIMARY KEY,"
        " rnc_empresa VARCHAR(20), banco_destino VARCHAR(50), fecha_pago DATE,"
        " monto_total DECIMAL(14,2), cuenta_origen VARCHAR(30), cantidad_registros INT)"
    )
    cursor.execute(
        f"CREATE TABLE {detail} ("
        " id_detalle INT AUTO_INCREMENT PRIMARY KEY,"
        " id_nomina INT NOT NULL,"
        " cedula VARCHAR(11) NOT NULL, correo VARCHAR(100), cuenta_bancaria VARCHAR(30),"
        " monto DECIMAL(14,2),"
        f" FOREIGN KEY (id_nomina) REFERENCES {batch}(id_nomina))"
    )
    yield conn
    cursor.execute(f"DROP TABLE IF EXISTS {detail}")
    cursor.execute(f"DROP TABLE IF EXISTS {batch}")
    cursor.close()
    conn.close()
