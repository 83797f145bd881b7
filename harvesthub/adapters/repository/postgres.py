"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Race Safety:
------------
The uniqueness pre-check in the domain service is advisory only. Two
concurrent registrations for the same email can both pass it; the UNIQUE
constraint on ``harvesthub_users.email`` is what actually decides the winner.
The loser's INSERT raises ``UniqueViolation``, which is translated to the
same ``DuplicateEmail`` the pre-check would have raised.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from psycopg import errors
from psycopg.types.json import Json
from psycopg_pool import ConnectionPool

from harvesthub.domain.account import NewAccount
from harvesthub.domain.exceptions import DuplicateEmail

logger = logging.getLogger(__name__)


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def email_exists(self, email: str) -> bool:
        """Return True if an account row is stored for this exact email."""
        sql = "SELECT 1 FROM harvesthub_users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            return cursor.fetchone() is not None

    @contextmanager
    def insert_account(self, account: NewAccount) -> Iterator[str]:
        """
        Insert the account row and yield its id before committing.

        The pool connection context commits when the block exits cleanly
        and rolls back when it raises, so the row only becomes visible if
        the caller's follow-up work succeeds.

        Args:
            account: Fully provisioned account row

        Yields:
            Generated account id (UUID as string)

        Raises:
            DuplicateEmail: If the unique constraint on email rejects the row
        """
        sql = """
            INSERT INTO harvesthub_users (
                email, password, first_name, last_name, phone_number, date_of_birth,
                account_type, business_name, registration_number, business_document_url,
                verification_token, two_factor_secret, two_factor_backup_codes
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        params = (
            account.email,
            account.password_hash,
            account.first_name,
            account.last_name,
            account.phone_number,
            account.date_of_birth,
            account.account_type.value,
            account.business_name,
            account.registration_number,
            account.business_document_url,
            account.verification_token,
            account.two_factor_secret,
            Json(account.two_factor_backup_codes),
        )

        with self._pool.connection() as conn:
            with conn.cursor() as cursor:
                try:
                    cursor.execute(sql, params)
                except errors.UniqueViolation:
                    logger.warning("Unique constraint rejected concurrent registration")
                    raise DuplicateEmail(account.email) from None
                account_id = str(cursor.fetchone()[0])
            yield account_id


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: harvesthub/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
