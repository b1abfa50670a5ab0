# src/xregister/adapters/persistence/schema.py
"""
Exchange Schema - Table Definitions and Migration

Creates the `exchanges` table (current rate per pair, unique on
base/target) and the `exchange_rate_history` table (append-only trail,
cascade-deleted with its exchange). Statements are idempotent.

Files that USE this module:
- xregister.app (migrate command)
- tests.conftest (migrated store fixture)

Files that this module USES:
- xregister.adapters.persistence.store (ExchangeStore)
"""
import logging

from xregister.adapters.persistence.store import ExchangeStore

logger = logging.getLogger(__name__)

EXCHANGES_TABLE = "exchanges"
HISTORY_TABLE = "exchange_rate_history"

SQLITE_DDL = [
    """
    CREATE TABLE IF NOT EXISTS exchanges (
        id               INTEGER     PRIMARY KEY AUTOINCREMENT,
        base_currency    VARCHAR(10) NOT NULL,
        target_currency  VARCHAR(10) NOT NULL,
        rate             REAL        NOT NULL,
        created_at       TIMESTAMP   NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at       TIMESTAMP   NULL,
        UNIQUE (base_currency, target_currency)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS exchange_rate_history (
        id           INTEGER   PRIMARY KEY AUTOINCREMENT,
        exchange_id  INTEGER   NOT NULL REFERENCES exchanges(id) ON DELETE CASCADE,
        rate         REAL      NOT NULL,
        created_at   TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_history_exchange_id ON exchange_rate_history(exchange_id)",
]

POSTGRES_DDL = [
    """
    CREATE TABLE IF NOT EXISTS exchanges (
        id               SERIAL           PRIMARY KEY,
        base_currency    VARCHAR(10)      NOT NULL,
        target_currency  VARCHAR(10)      NOT NULL,
        rate             DOUBLE PRECISION NOT NULL,
        created_at       TIMESTAMP        NOT NULL DEFAULT (now() AT TIME ZONE 'UTC'),
        updated_at       TIMESTAMP        NULL,
        UNIQUE (base_currency, target_currency)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS exchange_rate_history (
        id           SERIAL           PRIMARY KEY,
        exchange_id  BIGINT           NOT NULL REFERENCES exchanges(id) ON DELETE CASCADE,
        rate         DOUBLE PRECISION NOT NULL,
        created_at   TIMESTAMP        NOT NULL DEFAULT (now() AT TIME ZONE 'UTC')
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_history_exchange_id ON exchange_rate_history(exchange_id)",
]


def ddl_for(store: ExchangeStore) -> list[str]:
    """Return the DDL statements matching the store's dialect."""
    if store.dialect == "postgresql":
        return POSTGRES_DDL
    return SQLITE_DDL


def migrate(store: ExchangeStore) -> None:
    """Create the exchange tables if they don't exist."""
    with store.transaction():
        for statement in ddl_for(store):
            store.execute(statement)
    logger.info("Schema ready: %s, %s", EXCHANGES_TABLE, HISTORY_TABLE)
