"""
Schema self-diagnosis

The database schema and the application can drift (a deploy that ran
without its migration). Errors caused by that drift are recognized here
and mapped to the SQL that fixes them, so the API can answer with a
corrective action instead of a bare 500.
"""
from dataclasses import dataclass
from typing import Optional, List, Tuple
import re
import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from storefront.core.database import Base

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    name: str
    tables: Tuple[str, ...]
    columns: Tuple[str, ...]
    sql: str


@dataclass(frozen=True)
class SchemaIssue:
    migration: Optional[str]
    message: str
    sql: Optional[str]

    def as_dict(self) -> dict:
        return {"migration": self.migration, "message": self.message, "sql": self.sql}


MIGRATIONS: List[Migration] = [
    Migration(
        name="commission_paid",
        tables=(),
        columns=("orders.commission_paid",),
        sql=(
            "ALTER TABLE orders ADD COLUMN IF NOT EXISTS commission_paid boolean DEFAULT false;"
        ),
    ),
    Migration(
        name="commission_logs",
        tables=("commission_logs",),
        columns=(),
        sql=(
            "CREATE TABLE IF NOT EXISTS commission_logs (\n"
            "  id serial PRIMARY KEY,\n"
            "  affiliate_id integer NOT NULL REFERENCES profiles(id),\n"
            "  order_id integer NOT NULL REFERENCES orders(id),\n"
            "  amount bigint NOT NULL,\n"
            "  source_buyer varchar,\n"
            "  products text,\n"
            "  created_at timestamptz NOT NULL DEFAULT now(),\n"
            "  CONSTRAINT uq_commission_logs_order UNIQUE (order_id)\n"
            ");"
        ),
    ),
    Migration(
        name="vouchers",
        tables=("vouchers",),
        columns=("orders.subtotal", "orders.discount_amount", "orders.voucher_code"),
        sql=(
            "CREATE TABLE IF NOT EXISTS vouchers (\n"
            "  id serial PRIMARY KEY,\n"
            "  code varchar NOT NULL UNIQUE,\n"
            "  discount_type varchar NOT NULL,\n"
            "  discount_value bigint NOT NULL,\n"
            "  is_active boolean NOT NULL DEFAULT true,\n"
            "  created_at timestamptz NOT NULL DEFAULT now()\n"
            ");\n"
            "ALTER TABLE orders ADD COLUMN IF NOT EXISTS subtotal bigint DEFAULT 0;\n"
            "ALTER TABLE orders ADD COLUMN IF NOT EXISTS discount_amount bigint DEFAULT 0;\n"
            "ALTER TABLE orders ADD COLUMN IF NOT EXISTS voucher_code varchar;"
        ),
    ),
    Migration(
        name="guest_orders",
        tables=(),
        columns=("orders.guest_info",),
        sql=(
            "ALTER TABLE orders ALTER COLUMN user_id DROP NOT NULL;\n"
            "ALTER TABLE orders ADD COLUMN IF NOT EXISTS guest_info json;"
        ),
    ),
    Migration(
        name="bank_details",
        tables=(),
        columns=("profiles.bank_name", "profiles.bank_number", "profiles.bank_holder"),
        sql=(
            "ALTER TABLE profiles ADD COLUMN IF NOT EXISTS bank_name varchar;\n"
            "ALTER TABLE profiles ADD COLUMN IF NOT EXISTS bank_number varchar;\n"
            "ALTER TABLE profiles ADD COLUMN IF NOT EXISTS bank_holder varchar;"
        ),
    ),
    Migration(
        name="cost_price",
        tables=(),
        columns=("products.cost_price",),
        sql="ALTER TABLE products ADD COLUMN IF NOT EXISTS cost_price bigint NOT NULL DEFAULT 0;",
    ),
    Migration(
        name="payouts",
        tables=("payouts",),
        columns=(),
        sql=(
            "CREATE TABLE IF NOT EXISTS payouts (\n"
            "  id serial PRIMARY KEY,\n"
            "  affiliate_id integer NOT NULL REFERENCES profiles(id),\n"
            "  amount bigint NOT NULL,\n"
            "  status varchar(255) NOT NULL DEFAULT 'paid',\n"
            "  created_at timestamptz NOT NULL DEFAULT now()\n"
            ");"
        ),
    ),
]

_MISSING_TABLE_PATTERNS = [
    re.compile(r'no such table: (?:main\.)?"?(?P<table>\w+)"?'),
    re.compile(r'relation "(?:public\.)?(?P<table>\w+)" does not exist'),
    re.compile(r"Could not find the table '(?:public\.)?(?P<table>\w+)'"),
]
_MISSING_COLUMN_PATTERNS = [
    re.compile(r"no such column: (?P<table>\w+)\.(?P<column>\w+)"),
    re.compile(r"table (?P<table>\w+) has no column named (?P<column>\w+)"),
    re.compile(r"column (?P<table>\w+)\.(?P<column>\w+) does not exist"),
    re.compile(r'column "(?P<column>\w+)" of relation "(?P<table>\w+)" does not exist'),
]
_GENERIC_MARKERS = ("schema cache", "UndefinedTable", "UndefinedColumn")


def _find_migration(table: Optional[str] = None, column: Optional[str] = None) -> Optional[Migration]:
    for migration in MIGRATIONS:
        if table and not column and table in migration.tables:
            return migration
        if table and column and f"{table}.{column}" in migration.columns:
            return migration
    return None


def diagnose_schema_error(exc: BaseException) -> Optional[SchemaIssue]:
    """
    Map a database error to a schema issue

    Returns:
        SchemaIssue when the error looks like schema drift, None otherwise
    """
    text = str(exc)

    # Column messages can embed 'relation "x" does not exist', check them first
    for pattern in _MISSING_COLUMN_PATTERNS:
        match = pattern.search(text)
        if match:
            table, column = match.group("table"), match.group("column")
            migration = _find_migration(table=table, column=column)
            logger.warning(f"Schema mismatch: missing column {table}.{column}")
            return SchemaIssue(
                migration=migration.name if migration else None,
                message=f"Column '{table}.{column}' is missing from the database",
                sql=migration.sql if migration else None,
            )

    for pattern in _MISSING_TABLE_PATTERNS:
        match = pattern.search(text)
        if match:
            table = match.group("table")
            migration = _find_migration(table=table)
            logger.warning(f"Schema mismatch: missing table {table}")
            return SchemaIssue(
                migration=migration.name if migration else None,
                message=f"Table '{table}' is missing from the database",
                sql=migration.sql if migration else None,
            )

    if any(marker in text for marker in _GENERIC_MARKERS):
        logger.warning(f"Schema mismatch: {text[:200]}")
        return SchemaIssue(
            migration=None,
            message="Database schema is out of date, run `alembic upgrade head`",
            sql=None,
        )

    return None


def find_missing_tables(engine: Engine) -> List[str]:
    """Expected tables that do not exist in the connected database"""
    import storefront.models  # noqa: F401

    existing = set(inspect(engine).get_table_names())
    return sorted(name for name in Base.metadata.tables if name not in existing)
