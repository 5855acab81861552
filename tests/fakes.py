"""In-memory stand-ins for the SQL repositories, same interface, no database."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.admin_api import schemas
from src.admin_api.listing import ListQuery
from src.admin_api.passwords import hash_password


class FakeRepository:
    def __init__(
        self,
        columns: Sequence[str],
        search_columns: Sequence[str] = (),
        defaults: Optional[Dict[str, Any]] = None,
    ):
        self.columns = tuple(columns)
        self.search_columns = tuple(search_columns)
        self.defaults = defaults or {}
        self.rows: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1

    def _matches(self, row: Dict[str, Any], query: ListQuery) -> bool:
        for col, val in query.filters.items():
            if isinstance(val, list):
                if row.get(col) not in val:
                    return False
            elif row.get(col) != val:
                return False
        if query.search:
            needle = query.search.lower()
            return any(needle in str(row.get(col) or "").lower() for col in self.search_columns)
        return True

    def list(self, query: ListQuery) -> Tuple[List[Dict[str, Any]], int]:
        matched = [dict(r) for r in self.rows.values() if self._matches(r, query)]
        matched.sort(
            key=lambda r: (r.get(query.sort_column) is None, r.get(query.sort_column)),
            reverse=query.sort_order == "DESC",
        )
        end = None if query.limit is None else query.start + query.limit
        return matched[query.start:end], len(matched)

    def get(self, item_id: int) -> Optional[Dict[str, Any]]:
        row = self.rows.get(item_id)
        return dict(row) if row else None

    def find_by(self, column: str, value: Any) -> Optional[Dict[str, Any]]:
        for row in self.rows.values():
            if row.get(column) == value:
                return dict(row)
        return None

    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {col: None for col in self.columns}
        for col, default in self.defaults.items():
            row[col] = default() if callable(default) else default
        row.update({k: v for k, v in values.items() if k in self.columns})
        row["id"] = self._next_id
        self._next_id += 1
        self.rows[row["id"]] = row
        return dict(row)

    def update(self, item_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        self.rows[item_id].update({k: v for k, v in changes.items() if k in self.columns})
        return dict(self.rows[item_id])

    def delete(self, item_id: int) -> Optional[Dict[str, Any]]:
        return self.rows.pop(item_id, None)

    def delete_by(self, column: str, value: Any) -> List[Dict[str, Any]]:
        doomed = [i for i, r in self.rows.items() if r.get(column) == value]
        return [self.rows.pop(i) for i in doomed]


def _now():
    return datetime.now(timezone.utc)


class FakeUserRepository(FakeRepository):
    def __init__(self):
        super().__init__(
            tuple(schemas.User.model_fields),
            search_columns=("firstname", "lastname", "email"),
            defaults={"admin": False, "created": _now},
        )
        self.passwords: Dict[int, str] = {}

    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = super().create(values)
        self.passwords[row["id"]] = hash_password(values["password"])
        return row

    def update(self, item_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        if changes.get("password"):
            self.passwords[item_id] = hash_password(changes["password"])
        return super().update(item_id, changes)

    def get_credentials(self, email: str) -> Optional[Dict[str, Any]]:
        row = self.find_by("email", email.lower())
        if row:
            row["password"] = self.passwords[row["id"]]
        return row


class FakeSessionRepository:
    def __init__(self, users: FakeUserRepository):
        self.users = users
        self.sessions: Dict[str, Dict[str, Any]] = {}

    def open(self, id_user: int, ttl: timedelta) -> Dict[str, Any]:
        session = {
            "id": secrets.token_urlsafe(16),
            "id_user": id_user,
            "created": _now(),
            "expires": _now() + ttl,
        }
        self.sessions[session["id"]] = session
        return dict(session)

    def get_active(self, session_id: str) -> Optional[Dict[str, Any]]:
        session = self.sessions.get(session_id)
        if not session or session["expires"] <= _now():
            return None
        user = self.users.get(session["id_user"])
        if not user:
            return None
        return {"session_id": session_id, "expires": session["expires"], **user}

    def close(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        expired = [sid for sid, s in self.sessions.items() if s["expires"] <= _now()]
        for sid in expired:
            del self.sessions[sid]
        return len(expired)


def build_fake_registry() -> Dict[str, Any]:
    users = FakeUserRepository()
    return {
        "users": users,
        "addresses": FakeRepository(
            tuple(schemas.Address.model_fields),
            search_columns=("address_line1", "address_line2", "city", "country"),
        ),
        "status": FakeRepository(tuple(schemas.Status.model_fields), search_columns=("name",)),
        "colors": FakeRepository(tuple(schemas.Color.model_fields), search_columns=("name", "color_code")),
        "products": FakeRepository(
            tuple(schemas.Product.model_fields),
            search_columns=("name", "description"),
            defaults={"quantity": 0, "created": _now},
        ),
        "images": FakeRepository(tuple(schemas.Image.model_fields), search_columns=("name", "description")),
        "paragraphs": FakeRepository(tuple(schemas.Paragraph.model_fields), search_columns=("title", "content")),
        "sessions": FakeSessionRepository(users),
    }
