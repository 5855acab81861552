"""
CRUD router factory.

Every resource exposes the same five endpoints under ``/api/<name>``:
list (with Content-Range), get by id (404), create (201), update and delete
(both 409 when the id does not exist). Writes require an admin session.
Update and delete answer with the full record because react-admin needs it.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.admin_api import repositories
from src.admin_api.auth_utils import get_current_session, require_admin
from src.admin_api.error_handlers import UnprocessableEntity
from src.admin_api.listing import RawListParams, content_range, list_params, parse_list_query
from src.admin_api.schemas import ApiModel, CreatePayload, UpdatePayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resource:
    name: str  # URL segment, repository name and Content-Range unit
    label: str  # singular, used in error messages
    schema: Type[ApiModel]
    create_schema: Type[CreatePayload]
    update_schema: Type[UpdatePayload]
    # column -> name of the resource it points to
    references: Mapping[str, str] = field(default_factory=dict)
    unique: Tuple[str, ...] = ()
    read_requires_session: bool = False
    tag: str = "Catalog"


def not_found(label: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label.capitalize()} not found")


def conflict(msg: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=msg)


def _alias(resource: Resource, column: str) -> str:
    info = resource.schema.model_fields.get(column)
    return (info.alias if info and info.alias else column)


# PUBLIC_INTERFACE
def record_exists(resource: Resource):
    """Build a dependency loading the record at ``item_id`` or failing with 409."""

    def _existing(item_id: int) -> Dict[str, Any]:
        record = repositories.get(resource.name).get(item_id)
        if not record:
            raise conflict(f"This {resource.label} does not exist")
        return record

    return _existing


# PUBLIC_INTERFACE
def check_references(resource: Resource, values: Dict[str, Any]) -> None:
    """Reject values whose foreign keys point at missing rows."""
    for column, target in resource.references.items():
        value = values.get(column)
        if value is None:
            continue
        if repositories.get(target).get(value) is None:
            alias = _alias(resource, column)
            raise UnprocessableEntity(f"'{alias}' does not reference an existing {target} record", field=alias)


# PUBLIC_INTERFACE
def check_unique(resource: Resource, values: Dict[str, Any], item_id: Optional[int] = None) -> None:
    """Reject values colliding with another row on a unique column."""
    for column in resource.unique:
        value = values.get(column)
        if value is None:
            continue
        other = repositories.get(resource.name).find_by(column, value)
        if other and other.get("id") != item_id:
            raise conflict(f"This {resource.label} already exists")


# PUBLIC_INTERFACE
def build_router(resource: Resource) -> APIRouter:
    """Create the list/get/create/update/delete router for one resource."""
    router = APIRouter(prefix=f"/api/{resource.name}", tags=[resource.tag])
    read_dependencies = [Depends(get_current_session)] if resource.read_requires_session else []
    existing = record_exists(resource)
    read_schema = resource.schema
    create_schema = resource.create_schema
    update_schema = resource.update_schema

    def _repo():
        return repositories.get(resource.name)

    @router.get(
        "",
        response_model=List[read_schema],
        dependencies=read_dependencies,
        name=f"list_{resource.name}",
        summary=f"List {resource.name}",
    )
    def list_items(response: Response, params: RawListParams = Depends(list_params)) -> List[Dict[str, Any]]:
        """List records; honours react-admin sort/range/filter and sets Content-Range."""
        query = parse_list_query(params, read_schema)
        rows, total = _repo().list(query)
        response.headers["Content-Range"] = content_range(resource.name, query.start, rows, total)
        return rows

    @router.get(
        "/{item_id}",
        response_model=read_schema,
        dependencies=read_dependencies,
        name=f"get_{resource.name}",
        summary=f"Get {resource.label}",
    )
    def get_item(item_id: int) -> Dict[str, Any]:
        record = _repo().get(item_id)
        if not record:
            raise not_found(resource.label)
        return record

    @router.post(
        "",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{resource.name}",
        summary=f"Create {resource.label}",
    )
    def create_item(payload: create_schema, session: Dict[str, Any] = Depends(require_admin)) -> Dict[str, Any]:
        values = payload.to_columns()
        check_references(resource, values)
        check_unique(resource, values)
        record = _repo().create(values)
        logger.info(
            "%s created",
            resource.label.capitalize(),
            extra={"resource": resource.name, "record_id": record.get("id"), "user_id": session.get("id")},
        )
        return record

    @router.put(
        "/{item_id}",
        response_model=read_schema,
        name=f"update_{resource.name}",
        summary=f"Update {resource.label}",
    )
    def update_item(
        item_id: int,
        payload: update_schema,
        session: Dict[str, Any] = Depends(require_admin),
        record: Dict[str, Any] = Depends(existing),
    ) -> Dict[str, Any]:
        changes = payload.to_columns()
        check_references(resource, changes)
        check_unique(resource, changes, item_id=item_id)
        updated = _repo().update(item_id, changes)
        logger.info(
            "%s updated",
            resource.label.capitalize(),
            extra={"resource": resource.name, "record_id": item_id, "user_id": session.get("id")},
        )
        return updated

    @router.delete(
        "/{item_id}",
        response_model=read_schema,
        name=f"delete_{resource.name}",
        summary=f"Delete {resource.label}",
    )
    def delete_item(
        item_id: int,
        session: Dict[str, Any] = Depends(require_admin),
        record: Dict[str, Any] = Depends(existing),
    ) -> Dict[str, Any]:
        deleted = _repo().delete(item_id)
        if not deleted:
            raise conflict(f"{resource.label.capitalize()} not found")
        logger.info(
            "%s deleted",
            resource.label.capitalize(),
            extra={"resource": resource.name, "record_id": item_id, "user_id": session.get("id")},
        )
        return deleted

    return router
