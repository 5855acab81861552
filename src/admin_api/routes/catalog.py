"""Catalog content: products, their images and text paragraphs, plus the status and color lookups."""
from src.admin_api.routes.crud import Resource, build_router
from src.admin_api.schemas import (
    Color,
    ColorCreate,
    ColorUpdate,
    Image,
    ImageCreate,
    ImageUpdate,
    Paragraph,
    ParagraphCreate,
    ParagraphUpdate,
    Product,
    ProductCreate,
    ProductUpdate,
    Status,
    StatusCreate,
    StatusUpdate,
)

STATUS = Resource(
    name="status",
    label="status",
    schema=Status,
    create_schema=StatusCreate,
    update_schema=StatusUpdate,
    unique=("name",),
)

COLORS = Resource(
    name="colors",
    label="color",
    schema=Color,
    create_schema=ColorCreate,
    update_schema=ColorUpdate,
    unique=("name",),
)

PRODUCTS = Resource(
    name="products",
    label="product",
    schema=Product,
    create_schema=ProductCreate,
    update_schema=ProductUpdate,
    references={"id_status": "status", "id_color": "colors"},
)

IMAGES = Resource(
    name="images",
    label="image",
    schema=Image,
    create_schema=ImageCreate,
    update_schema=ImageUpdate,
    references={"id_product": "products"},
)

PARAGRAPHS = Resource(
    name="paragraphs",
    label="paragraph",
    schema=Paragraph,
    create_schema=ParagraphCreate,
    update_schema=ParagraphUpdate,
    references={"id_image": "images"},
)

routers = [build_router(r) for r in (STATUS, COLORS, PRODUCTS, IMAGES, PARAGRAPHS)]
