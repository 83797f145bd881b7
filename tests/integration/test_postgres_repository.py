"""
Integration tests for PostgresAccountRepository.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL reachable at DATABASE_URL; skipped otherwise.
"""

import threading
from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from harvesthub.adapters.repository import PostgresAccountRepository, run_migrations
from harvesthub.config.settings import get_settings
from harvesthub.domain.account import AccountType, NewAccount
from harvesthub.domain.exceptions import DuplicateEmail

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError:
        pytest.skip("PostgreSQL is not reachable")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean accounts table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM harvesthub_users")
    yield


def make_account(email: str = "ada@example.com", **overrides) -> NewAccount:
    values = dict(
        email=email,
        password_hash="$2b$10$hashedpasswordvalue",
        first_name="Ada",
        last_name="Lovelace",
        account_type=AccountType.INDIVIDUAL,
        verification_token="header.payload.signature",
        two_factor_secret="JBSWY3DPEHPK3PXP",
        two_factor_backup_codes=[f"CODE{i:06d}" for i in range(10)],
        phone_number="07911123456",
        date_of_birth=date(1990, 5, 1),
    )
    values.update(overrides)
    return NewAccount(**values)


def fetch_row(pool: ConnectionPool, email: str) -> tuple | None:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            """
            SELECT id::text, password, phone_number, date_of_birth, account_type,
                   business_name, business_document_url, two_factor_backup_codes
            FROM harvesthub_users WHERE email = %s
            """,
            (email,),
        )
        return cursor.fetchone()


class TestInsertAccount:
    """Tests for insert_account method."""

    def test_insert_commits_and_yields_id(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        with repository.insert_account(make_account()) as account_id:
            assert account_id

        row = fetch_row(pool, "ada@example.com")
        assert row is not None
        assert row[0] == account_id
        assert row[1] == "$2b$10$hashedpasswordvalue"
        assert row[2] == "07911123456"
        assert row[3] == date(1990, 5, 1)
        assert row[4] == "individual"

    def test_backup_codes_stored_as_json_array(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        with repository.insert_account(make_account()):
            pass

        row = fetch_row(pool, "ada@example.com")
        assert row[7] == [f"CODE{i:06d}" for i in range(10)]

    def test_business_columns(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        account = make_account(
            "orders@greenacre.co.uk",
            account_type=AccountType.BUSINESS,
            phone_number=None,
            date_of_birth=None,
            business_name="Green Acre Farms",
            registration_number="GB123456",
            business_document_url="https://mock-s3.com/Green-Acre-Farms-doc.pdf",
        )

        with repository.insert_account(account):
            pass

        row = fetch_row(pool, "orders@greenacre.co.uk")
        assert row[4] == "business"
        assert row[5] == "Green Acre Farms"
        assert row[6] == "https://mock-s3.com/Green-Acre-Farms-doc.pdf"

    def test_exception_in_block_rolls_back(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        with pytest.raises(RuntimeError):
            with repository.insert_account(make_account()):
                raise RuntimeError("email relay down")

        assert fetch_row(pool, "ada@example.com") is None
        assert repository.email_exists("ada@example.com") is False

    def test_duplicate_email_raises(self, repository: PostgresAccountRepository) -> None:
        with repository.insert_account(make_account()):
            pass

        with pytest.raises(DuplicateEmail):
            with repository.insert_account(make_account(first_name="Other")):
                pass

    def test_email_match_is_exact(self, repository: PostgresAccountRepository) -> None:
        with repository.insert_account(make_account("ada@example.com")):
            pass

        with repository.insert_account(make_account("Ada@example.com")):
            pass

        assert repository.email_exists("Ada@example.com") is True


class TestEmailExists:
    """Tests for email_exists method."""

    def test_unknown_email(self, repository: PostgresAccountRepository) -> None:
        assert repository.email_exists("nobody@example.com") is False

    def test_stored_email(self, repository: PostgresAccountRepository) -> None:
        with repository.insert_account(make_account()):
            pass

        assert repository.email_exists("ada@example.com") is True


class TestConcurrentInsert:
    def test_concurrent_inserts_exactly_one_wins(self, pool: ConnectionPool) -> None:
        """Parallel inserts for one email: the unique constraint picks a single winner."""
        email = "race@example.com"
        outcomes: list[str] = []
        outcomes_lock = threading.Lock()
        workers = 5

        def insert() -> None:
            repo = PostgresAccountRepository(pool)
            try:
                with repo.insert_account(make_account(email)):
                    pass
                outcome = "created"
            except DuplicateEmail:
                outcome = "duplicate"
            with outcomes_lock:
                outcomes.append(outcome)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(insert) for _ in range(workers)]
            for f in futures:
                f.result()

        assert outcomes.count("created") == 1
        assert outcomes.count("duplicate") == workers - 1

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM harvesthub_users WHERE email = %s", (email,))
            assert cursor.fetchone()[0] == 1
