from src.admin_api.routes.crud import Resource, build_router
from src.admin_api.schemas import Address, AddressCreate, AddressUpdate

ADDRESSES = Resource(
    name="addresses",
    label="address",
    schema=Address,
    create_schema=AddressCreate,
    update_schema=AddressUpdate,
    references={"id_user": "users"},
    read_requires_session=True,
    tag="Addresses",
)

router = build_router(ADDRESSES)
