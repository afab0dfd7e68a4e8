from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(description="Category name, trimmed and non-empty")
    count: int = Field(description="Number of products to generate for the category", ge=1, le=100)


class OrganizedBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[CategoryRequest, ...]
    total_count: int


def _as_price_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class ProductVariant(BaseModel):
    title: str = ""
    price: str = ""

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, value: Any) -> str:
        return _as_price_text(value)


class ProductContent(BaseModel):
    """Structured text payload returned by the model for a single product."""

    title: str
    description: str = ""
    price: str = ""
    variants: list[ProductVariant] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, value: Any) -> str:
        return _as_price_text(value)

    @field_validator("features", mode="before")
    @classmethod
    def coerce_features(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, list | tuple):
            raise ValueError(f"features must be a list of strings, got {type(value).__name__}")
        return [str(feature) for feature in value]


class GeneratedProduct(ProductContent):
    image: str = Field(description="Product image as a base64 data URI")
    category: str


class CreatedProduct(BaseModel):
    id: str = Field(description="Identifier assigned by Shopify")
    title: str
    image: str = ""


class WorkflowResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    total_requested: int = Field(alias="totalRequested")
    created: list[CreatedProduct] = Field(default_factory=list, alias="createdProducts")
    errors: list[str] | None = None

    def to_response(self) -> dict[str, Any]:
        """Camel-cased shape returned to API and CLI callers; errors omitted when empty."""
        return self.model_dump(by_alias=True, exclude_none=True)
