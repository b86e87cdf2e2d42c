"""Thin CRUD wrapper over a single Supabase table."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from supabase import Client

from coaching_api.database import execute
from coaching_api.errors import BackendError, NotFoundError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class TableService:
    """Insert/update/delete/list rows of one table, raising BackendError on failure."""

    def __init__(self, client: Client, table: str):
        self.client = client
        self.table = table

    def get(self, row_id: Any, columns: str = "*") -> Optional[Row]:
        """Return the row with ``id == row_id`` or None."""
        result = execute(
            self.client.table(self.table).select(columns).eq("id", row_id).limit(1),
            f"{self.table} lookup",
        )
        rows = result.data or []
        return rows[0] if rows else None

    def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = "created_at",
        descending: bool = True,
    ) -> List[Row]:
        query = self.client.table(self.table).select("*")
        for column, value in (filters or {}).items():
            if value is not None:
                query = query.eq(column, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        return execute(query, f"{self.table} list").data or []

    def insert(self, row: Mapping[str, Any]) -> Row:
        result = execute(self.client.table(self.table).insert(dict(row)), f"{self.table} insert")
        rows = result.data or []
        if not rows:
            raise BackendError(f"{self.table} insert returned no rows")
        logger.info(f"Inserted {self.table} row {rows[0].get('id')}")
        return rows[0]

    def update(self, row_id: Any, values: Mapping[str, Any]) -> Row:
        """Update one row by id. Raises NotFoundError if nothing matched."""
        result = execute(
            self.client.table(self.table).update(dict(values)).eq("id", row_id),
            f"{self.table} update",
        )
        rows = result.data or []
        if not rows:
            raise NotFoundError(f"{self.table} row {row_id} not found")
        return rows[0]

    def delete(self, row_id: Any) -> List[Row]:
        result = execute(
            self.client.table(self.table).delete().eq("id", row_id),
            f"{self.table} delete",
        )
        deleted = result.data or []
        logger.info(f"Deleted {len(deleted)} {self.table} row(s) for id {row_id}")
        return deleted
