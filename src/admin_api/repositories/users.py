from typing import Any, Dict, Optional

from src.admin_api import db
from src.admin_api.passwords import hash_password
from src.admin_api.repositories.base import Repository
from src.admin_api.schemas import User


class UserRepository(Repository):
    """Users table. The password hash is written here but never selected by default."""

    def __init__(self):
        super().__init__(
            "users",
            tuple(User.model_fields),
            search_columns=("firstname", "lastname", "email"),
            touch_column="modified",
        )

    def _check_columns(self, names) -> None:
        super()._check_columns([n for n in names if n != "password"])

    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(values)
        values["password"] = hash_password(values["password"])
        return super().create(values)

    def update(self, item_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = dict(changes)
        if changes.get("password"):
            changes["password"] = hash_password(changes["password"])
        else:
            changes.pop("password", None)
        return super().update(item_id, changes)

    # PUBLIC_INTERFACE
    def get_credentials(self, email: str) -> Optional[Dict[str, Any]]:
        """User row including the password hash, for login only."""
        return db.fetch_one(
            f"SELECT {self._select}, password FROM users WHERE email=%s",
            [email.lower()],
        )
