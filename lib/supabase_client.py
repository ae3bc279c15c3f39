# =============================================================================
# lib/supabase_client.py - Supabase Data Access Gateway
# =============================================================================
# This module provides a thin wrapper for hosted database operations.
# Every method is exactly one round trip through the Supabase client:
# - get: one row by id
# - list: rows matching equality filters
# - count: number of rows matching equality filters
# - insert / update / delete: single-row writes
#
# There is no caching, no retry and no transaction spanning several calls.
# Any failure from the hosted service is re-raised as UpstreamError with the
# service's message passed through verbatim. The exceptions are "no rows"
# (PGRST116) and malformed key values such as a non-UUID id (22P02), which
# read as an empty result: None, [] or 0.
#
# Usage:
#   from app.config import get_settings
#   from lib.supabase_client import SupabaseGateway
#   gateway = SupabaseGateway(get_settings())
#   tool = gateway.get("tools", tool_id)
# =============================================================================

from __future__ import annotations

import logging
from enum import Enum
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import Settings
from app.exceptions import UpstreamError
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matched
NO_ROWS_CODE = "PGRST116"

# Postgres "invalid input syntax" (e.g. a non-UUID value for a uuid column).
# No row can match such a value, so it is treated like an empty result.
INVALID_INPUT_CODE = "22P02"


def _matches_nothing(error: Exception) -> bool:
    """True if the failure only means no row could match the query."""
    code = getattr(error, "code", None)
    if code in (NO_ROWS_CODE, INVALID_INPUT_CODE):
        return True
    message = str(error)
    return NO_ROWS_CODE in message or INVALID_INPUT_CODE in message


def _to_param(value: Any) -> Any:
    """Convert enums and UUIDs into plain values PostgREST understands."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return normalize_uuid(value)
    return value


class SupabaseGateway:
    """
    Typed wrapper for hosted database operations.

    The gateway is built from an explicit Settings object. The underlying
    Supabase client is created on first use, or can be handed in directly
    (tests pass an in-memory stand-in).

    Example:
        gateway = SupabaseGateway(settings)
        row = gateway.insert("comments", {"tool_id": "...", "status": "pending"})
        pending = gateway.list("comments", {"status": "pending"})
    """

    def __init__(self, settings: Settings, client: Client | None = None):
        self._settings = settings
        self._client = client

    @property
    def client(self) -> Client:
        """
        Get or create the Supabase client.

        Uses the service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            UpstreamError: If client creation fails
        """
        if self._client is None:
            try:
                self._client = create_client(
                    self._settings.SUPABASE_URL,
                    self._settings.SUPABASE_SERVICE_KEY,
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise UpstreamError(
                    f"Failed to create Supabase client: {e}",
                    operation="connect",
                    table="*",
                ) from e
        return self._client

    @staticmethod
    def _apply_filters(query: Any, filters: dict[str, Any] | None) -> Any:
        for column, value in (filters or {}).items():
            query = query.eq(column, _to_param(value))
        return query

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, table: str, row_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single row by id.

        Returns:
            Row dict, or None if no row has this id

        Raises:
            UpstreamError: If the query fails
        """
        row_id_str = normalize_uuid(row_id)

        try:
            response = (
                self.client.table(table)
                .select("*")
                .eq("id", row_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if _matches_nothing(e):
                return None
            logger.error(f"get {table}/{row_id_str} failed: {e}")
            raise UpstreamError(str(e), operation="get", table=table) from e

    def list(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = "created_at",
        desc: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows matching all equality filters.

        Args:
            table: Table name
            filters: Column -> value; every pair must match
            order_by: Column to sort on (None keeps database order)
            desc: Newest first when sorting on a timestamp
            limit: Maximum number of rows

        Returns:
            List of row dicts (possibly empty)
        """
        try:
            query = self._apply_filters(self.client.table(table).select("*"), filters)
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table} with filters {filters}")
            return rows

        except Exception as e:
            if _matches_nothing(e):
                return []
            logger.error(f"list {table} failed: {e}")
            raise UpstreamError(str(e), operation="list", table=table) from e

    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count rows matching all equality filters."""
        try:
            query = self._apply_filters(
                self.client.table(table).select("id", count="exact"),
                filters,
            )
            response = query.execute()
            return response.count or 0

        except Exception as e:
            if _matches_nothing(e):
                return 0
            logger.error(f"count {table} failed: {e}")
            raise UpstreamError(str(e), operation="count", table=table) from e

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return it as stored (with generated id/timestamps).

        Raises:
            UpstreamError: If the insert fails or returns nothing
        """
        payload = {key: _to_param(value) for key, value in values.items()}

        try:
            response = self.client.table(table).insert(payload).execute()
        except Exception as e:
            logger.error(f"insert into {table} failed: {e}")
            raise UpstreamError(str(e), operation="insert", table=table) from e

        if not response.data:
            raise UpstreamError("Insert returned no data", operation="insert", table=table)
        return response.data[0]

    def update(
        self,
        table: str,
        row_id: str | UUID,
        values: dict[str, Any],
        match: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Update one row by id.

        Args:
            match: Extra equality conditions checked in the same statement.
                   If the row exists but doesn't satisfy them, nothing is
                   written and None is returned.

        Returns:
            The updated row, or None if nothing matched
        """
        row_id_str = normalize_uuid(row_id)
        payload = {key: _to_param(value) for key, value in values.items()}

        try:
            query = self.client.table(table).update(payload).eq("id", row_id_str)
            query = self._apply_filters(query, match)
            response = query.execute()
        except Exception as e:
            if _matches_nothing(e):
                return None
            logger.error(f"update {table}/{row_id_str} failed: {e}")
            raise UpstreamError(str(e), operation="update", table=table) from e

        return response.data[0] if response.data else None

    def delete(self, table: str, row_id: str | UUID) -> dict[str, Any] | None:
        """Delete one row by id. Returns the deleted row, or None if absent."""
        row_id_str = normalize_uuid(row_id)

        try:
            response = self.client.table(table).delete().eq("id", row_id_str).execute()
        except Exception as e:
            if _matches_nothing(e):
                return None
            logger.error(f"delete {table}/{row_id_str} failed: {e}")
            raise UpstreamError(str(e), operation="delete", table=table) from e

        return response.data[0] if response.data else None
