from pydantic import BaseModel, Field

from product_page.domain.entities.lookup import LookupStatus


class ImageSchema(BaseModel):
    id: int
    url: str
    title: str


class ColorSchema(BaseModel):
    id: int
    name: str
    code: str


class CatalogSchema(BaseModel):
    id: str
    title: str
    description: str
    price: float
    discount_price: float
    images: list[ImageSchema]
    sizes: list[str]
    colors: list[ColorSchema]
    stock: int
    rating: float
    reviews: int


class AddressSchema(BaseModel):
    postal_code: str
    street: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    not_found: bool = False


class SelectionSchema(BaseModel):
    main_image_id: int
    selected_size: str
    selected_color: str
    quantity: int
    postal_code: str
    resolved_address: AddressSchema | None = None


class SessionResponseSchema(BaseModel):
    session_id: str
    selection: SelectionSchema
    main_image: ImageSchema
    selected_color_name: str | None = None
    error: str | None = None
    loading: bool = False


class SelectImageRequestSchema(BaseModel):
    image_id: int


class SelectSizeRequestSchema(BaseModel):
    size: str


class SelectColorRequestSchema(BaseModel):
    color_code: str


class AdjustQuantityRequestSchema(BaseModel):
    delta: int


class PostalCodeRequestSchema(BaseModel):
    postal_code: str = Field(max_length=32)


class LookupResponseSchema(BaseModel):
    status: LookupStatus
    error: str | None = None
    session: SessionResponseSchema
