import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.admin_api import db
from src.admin_api.listing import ListQuery

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def build_update_statement(
    table: str,
    changes: Dict[str, Any],
    item_id: int,
    returning: Sequence[str],
) -> Tuple[str, List[Any]]:
    """
    Build a parameterized UPDATE writing only the given columns.

    Each present column appends one ``column=%s`` fragment and one bound
    value; the row id is bound last. Column names must already be whitelisted.
    """
    if not changes:
        raise ValueError("No columns to update")
    fields = []
    params: List[Any] = []
    for col, val in changes.items():
        fields.append(f"{col}=%s")
        params.append(val)
    params.append(item_id)
    sql = f"UPDATE {table} SET {', '.join(fields)} WHERE id=%s RETURNING {', '.join(returning)}"
    return sql, params


class Repository:
    """Parameterized CRUD over one table whose columns are known up front."""

    def __init__(
        self,
        table: str,
        columns: Sequence[str],
        search_columns: Sequence[str] = (),
        touch_column: Optional[str] = None,
    ):
        self.table = table
        self.columns = tuple(columns)
        self.search_columns = tuple(search_columns)
        # Stamped with the current time on every update that does not set it.
        self.touch_column = touch_column

    @property
    def _select(self) -> str:
        return ", ".join(self.columns)

    def _check_columns(self, names) -> None:
        unknown = [n for n in names if n not in self.columns]
        if unknown:
            raise ValueError(f"Unknown column(s) for {self.table}: {', '.join(unknown)}")

    def _where(self, query: ListQuery) -> Tuple[str, List[Any]]:
        where = []
        params: List[Any] = []
        self._check_columns(query.filters)
        for col, val in query.filters.items():
            if isinstance(val, list):
                where.append(f"{col} = ANY(%s)")
                params.append(val)
            elif val is None:
                where.append(f"{col} IS NULL")
            else:
                where.append(f"{col}=%s")
                params.append(val)
        if query.search and self.search_columns:
            where.append("(" + " OR ".join(f"{col} ILIKE %s" for col in self.search_columns) + ")")
            params.extend([f"%{query.search}%"] * len(self.search_columns))
        return (("WHERE " + " AND ".join(where)) if where else ""), params

    # PUBLIC_INTERFACE
    def list(self, query: ListQuery) -> Tuple[List[Dict[str, Any]], int]:
        """Return one page of rows plus the total number of matching rows."""
        self._check_columns([query.sort_column])
        order = "DESC" if query.sort_order == "DESC" else "ASC"
        where_sql, params = self._where(query)

        order_by = f"{query.sort_column} {order}"
        if query.sort_column != "id":
            # Ties on the sort column keep a stable order across pages.
            order_by += ", id"
        sql = f"SELECT {self._select} FROM {self.table} {where_sql} ORDER BY {order_by}"
        page_params = list(params)
        if query.limit is not None:
            sql += " LIMIT %s OFFSET %s"
            page_params.extend([query.limit, query.start])
        elif query.start:
            sql += " OFFSET %s"
            page_params.append(query.start)

        rows = db.fetch_all(sql, page_params)
        count = db.fetch_one(f"SELECT COUNT(*) AS total FROM {self.table} {where_sql}", params)
        return rows, int(count["total"]) if count else 0

    # PUBLIC_INTERFACE
    def get(self, item_id: int) -> Optional[Dict[str, Any]]:
        return db.fetch_one(f"SELECT {self._select} FROM {self.table} WHERE id=%s", [item_id])

    # PUBLIC_INTERFACE
    def find_by(self, column: str, value: Any) -> Optional[Dict[str, Any]]:
        """First row whose column equals value."""
        self._check_columns([column])
        return db.fetch_one(
            f"SELECT {self._select} FROM {self.table} WHERE {column}=%s ORDER BY id LIMIT 1",
            [value],
        )

    # PUBLIC_INTERFACE
    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it as stored."""
        self._check_columns(values)
        cols = list(values)
        placeholders = ", ".join(["%s"] * len(cols))
        row = db.execute_returning_one(
            f"INSERT INTO {self.table} ({', '.join(cols)}) VALUES ({placeholders}) RETURNING {self._select}",
            [values[c] for c in cols],
        )
        logger.debug("Created %s row", self.table, extra={"resource": self.table, "record_id": row.get("id")})
        return row

    # PUBLIC_INTERFACE
    def update(self, item_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Write only the given columns; no changes returns the current row."""
        if not changes:
            current = self.get(item_id)
            if current is None:
                raise RuntimeError(f"{self.table} row {item_id} vanished")
            return current
        self._check_columns(changes)
        if self.touch_column and self.touch_column not in changes:
            changes = {**changes, self.touch_column: datetime.now(timezone.utc)}
        sql, params = build_update_statement(self.table, changes, item_id, self.columns)
        row = db.execute_returning_one(sql, params)
        logger.debug("Updated %s row", self.table, extra={"resource": self.table, "record_id": item_id})
        return row

    # PUBLIC_INTERFACE
    def delete(self, item_id: int) -> Optional[Dict[str, Any]]:
        """Delete a row and return it, or None when nothing was deleted."""
        rows = db.execute_returning_all(
            f"DELETE FROM {self.table} WHERE id=%s RETURNING {self._select}",
            [item_id],
        )
        if rows:
            logger.debug("Deleted %s row", self.table, extra={"resource": self.table, "record_id": item_id})
        return rows[0] if rows else None

    # PUBLIC_INTERFACE
    def delete_by(self, column: str, value: Any) -> List[Dict[str, Any]]:
        """Delete every row whose column equals value and return them."""
        self._check_columns([column])
        rows = db.execute_returning_all(
            f"DELETE FROM {self.table} WHERE {column}=%s RETURNING {self._select}",
            [value],
        )
        logger.info("Deleted %d %s row(s)", len(rows), self.table, extra={"resource": self.table})
        return rows
