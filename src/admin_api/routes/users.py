import logging
from typing import Any, Dict, List

from fastapi import Depends, HTTPException, Response, status

from src.admin_api import repositories
from src.admin_api.auth_utils import get_current_session, require_admin
from src.admin_api.listing import RawListParams, content_range, list_params, parse_list_query
from src.admin_api.routes.addresses import ADDRESSES
from src.admin_api.routes.crud import Resource, build_router, record_exists
from src.admin_api.schemas import Address, User, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

USERS = Resource(
    name="users",
    label="user",
    schema=User,
    create_schema=UserCreate,
    update_schema=UserUpdate,
    unique=("email",),
    read_requires_session=True,
    tag="Users",
)

router = build_router(USERS)
user_exists = record_exists(USERS)


def _may_read_addresses(item_id: int, session: Dict[str, Any] = Depends(get_current_session)) -> Dict[str, Any]:
    # Declared before user_exists: a foreign id answers 403 whether or not it exists.
    if not session.get("admin") and session.get("id") != item_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    return session


@router.get(
    "/{item_id}/addresses",
    response_model=List[Address],
    summary="List a user's addresses",
)
def list_user_addresses(
    item_id: int,
    response: Response,
    params: RawListParams = Depends(list_params),
    session: Dict[str, Any] = Depends(_may_read_addresses),
    user: Dict[str, Any] = Depends(user_exists),
) -> List[Dict[str, Any]]:
    """Addresses of one user. Non-admin sessions may only read their own."""
    query = parse_list_query(params, Address)
    query.filters["id_user"] = item_id
    rows, total = repositories.get(ADDRESSES.name).list(query)
    response.headers["Content-Range"] = content_range(ADDRESSES.name, query.start, rows, total)
    return rows


@router.delete(
    "/{item_id}/addresses",
    response_model=List[Address],
    summary="Delete a user's addresses",
)
def delete_user_addresses(
    item_id: int,
    session: Dict[str, Any] = Depends(require_admin),
    user: Dict[str, Any] = Depends(user_exists),
) -> List[Dict[str, Any]]:
    """Remove every address of a user and return the removed records."""
    deleted = repositories.get(ADDRESSES.name).delete_by("id_user", item_id)
    logger.info(
        "Deleted %d address(es) of user %s",
        len(deleted),
        item_id,
        extra={"resource": ADDRESSES.name, "record_id": item_id, "user_id": session.get("id")},
    )
    return deleted
