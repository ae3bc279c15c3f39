# =============================================================================
# lib/migrations.py - Versioned Schema Migrations
# =============================================================================
# Applies ordered SQL files from the migrations/ directory to the hosted
# Postgres database and records each one in schema_migrations.
#
# File naming: NNNN_description.sql (e.g. 0003_create_votes.sql). The numeric
# prefix is the version; files are applied in ascending version order.
#
# Running the migrator twice is a no-op: applied versions are skipped. An
# applied file whose contents changed afterwards is reported as drift and
# stops the run before anything new is applied.
#
# Usage:
#   runner = MigrationRunner(settings.MIGRATIONS_DIR, connect=lambda: psycopg2.connect(url))
#   runner.run()
# =============================================================================

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import psycopg2

logger = logging.getLogger(__name__)

MIGRATION_FILE_PATTERN = re.compile(r"^(?P<version>\d{4,})_(?P<name>[a-z0-9_]+)\.sql$")

CREATE_MIGRATIONS_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version VARCHAR(32) PRIMARY KEY,
        filename VARCHAR(255) NOT NULL,
        checksum VARCHAR(64) NOT NULL,
        applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""


class MigrationError(Exception):
    """Raised when migration files are malformed, drifted, or fail to apply."""


@dataclass(frozen=True)
class Migration:
    """One migration file on disk."""

    version: str
    filename: str
    path: Path
    checksum: str

    @classmethod
    def from_path(cls, path: Path) -> "Migration":
        match = MIGRATION_FILE_PATTERN.match(path.name)
        if not match:
            raise MigrationError(
                f"Bad migration filename: {path.name} (expected NNNN_description.sql)"
            )
        return cls(
            version=match.group("version"),
            filename=path.name,
            path=path,
            checksum=hashlib.sha256(path.read_bytes()).hexdigest(),
        )

    def read_sql(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationStatus:
    """Applied/pending split for reporting."""

    applied: list[str]
    pending: list[Migration]

    @property
    def is_current(self) -> bool:
        return not self.pending


class MigrationRunner:
    """
    Apply pending migrations in version order.

    Args:
        migrations_dir: Directory containing NNNN_description.sql files
        connect: Zero-argument callable returning a DB-API connection
                 (psycopg2.connect in production)
    """

    def __init__(self, migrations_dir: Path, connect: Callable[[], Any]):
        self.migrations_dir = Path(migrations_dir)
        self._connect = connect

    @classmethod
    def from_url(cls, migrations_dir: Path, database_url: str) -> "MigrationRunner":
        if not database_url:
            raise MigrationError("DATABASE_URL is required to run migrations")
        return cls(migrations_dir, connect=lambda: psycopg2.connect(database_url))

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def discover(self) -> list[Migration]:
        """Load migration files sorted by numeric version."""
        if not self.migrations_dir.is_dir():
            raise MigrationError(f"Migrations directory not found: {self.migrations_dir}")

        migrations = [
            Migration.from_path(path)
            for path in self.migrations_dir.glob("*.sql")
        ]
        migrations.sort(key=lambda m: int(m.version))

        seen: dict[str, str] = {}
        for migration in migrations:
            if migration.version in seen:
                raise MigrationError(
                    f"Duplicate migration version {migration.version}: "
                    f"{seen[migration.version]} and {migration.filename}"
                )
            seen[migration.version] = migration.filename

        return migrations

    # -------------------------------------------------------------------------
    # Tracking table
    # -------------------------------------------------------------------------

    @staticmethod
    def _ensure_table(conn: Any) -> None:
        with conn.cursor() as cur:
            cur.execute(CREATE_MIGRATIONS_TABLE)
        conn.commit()

    @staticmethod
    def _applied(conn: Any) -> dict[str, str]:
        with conn.cursor() as cur:
            cur.execute("SELECT version, checksum FROM schema_migrations ORDER BY version")
            return {version: checksum for version, checksum in cur.fetchall()}

    def _check_drift(self, migrations: list[Migration], applied: dict[str, str]) -> None:
        drifted = [
            m.filename
            for m in migrations
            if m.version in applied and applied[m.version] != m.checksum
        ]
        if drifted:
            raise MigrationError(
                f"Applied migrations were modified after being applied: {', '.join(drifted)}. "
                "Add a new migration instead of editing an applied one."
            )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def status(self) -> MigrationStatus:
        """Report which versions are applied and which files are pending."""
        migrations = self.discover()
        conn = self._connect()
        try:
            self._ensure_table(conn)
            applied = self._applied(conn)
        finally:
            conn.close()

        self._check_drift(migrations, applied)
        return MigrationStatus(
            applied=sorted(applied, key=int),
            pending=[m for m in migrations if m.version not in applied],
        )

    def run(self, dry_run: bool = False) -> list[Migration]:
        """
        Apply every pending migration, each in its own transaction.

        Returns:
            The migrations that were applied (or would be, with dry_run)

        Raises:
            MigrationError: On drift or when a migration fails; earlier
                            migrations in the same run stay applied
        """
        migrations = self.discover()
        conn = self._connect()
        try:
            self._ensure_table(conn)
            applied = self._applied(conn)
            self._check_drift(migrations, applied)

            pending = [m for m in migrations if m.version not in applied]
            if not pending:
                logger.info("No pending migrations. Database is up to date")
                return []

            logger.info(f"Found {len(pending)} pending migrations")
            if dry_run:
                for migration in pending:
                    logger.info(f"  would apply {migration.filename}")
                return pending

            for migration in pending:
                self._apply(conn, migration)

            logger.info(f"Applied {len(pending)} migrations")
            return pending
        finally:
            conn.close()

    def _apply(self, conn: Any, migration: Migration) -> None:
        logger.info(f"Applying migration: {migration.filename}")
        try:
            with conn.cursor() as cur:
                cur.execute(migration.read_sql())
                cur.execute(
                    "INSERT INTO schema_migrations (version, filename, checksum) "
                    "VALUES (%s, %s, %s)",
                    (migration.version, migration.filename, migration.checksum),
                )
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to apply migration {migration.filename}: {e}")
            raise MigrationError(f"{migration.filename}: {e}") from e
