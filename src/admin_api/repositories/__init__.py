"""
Data access, one repository per table.

Routes look repositories up by name at request time through ``get`` so the
registry can be swapped wholesale (tests install in-memory fakes).
"""
from typing import Any, Dict

from src.admin_api import schemas
from src.admin_api.repositories.base import Repository, build_update_statement
from src.admin_api.repositories.sessions import SessionRepository
from src.admin_api.repositories.users import UserRepository

REGISTRY: Dict[str, Any] = {
    "users": UserRepository(),
    "addresses": Repository(
        "addresses",
        tuple(schemas.Address.model_fields),
        search_columns=("address_line1", "address_line2", "city", "country"),
    ),
    "status": Repository("status", tuple(schemas.Status.model_fields), search_columns=("name",)),
    "colors": Repository("colors", tuple(schemas.Color.model_fields), search_columns=("name", "color_code")),
    "products": Repository(
        "products",
        tuple(schemas.Product.model_fields),
        search_columns=("name", "description"),
        touch_column="modified",
    ),
    "images": Repository("images", tuple(schemas.Image.model_fields), search_columns=("name", "description")),
    "paragraphs": Repository(
        "paragraphs",
        tuple(schemas.Paragraph.model_fields),
        search_columns=("title", "content"),
    ),
    "sessions": SessionRepository(),
}


# PUBLIC_INTERFACE
def get(name: str) -> Any:
    """Repository registered under a resource name."""
    return REGISTRY[name]


__all__ = ["REGISTRY", "Repository", "SessionRepository", "UserRepository", "build_update_statement", "get"]
