"""
Product import schemas for validation and serialization.

Covers the mapped product record sent to the CMS, the import request,
and the two shapes of the import start response.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Annotated, Literal, Optional, Union
from enum import Enum
from decimal import Decimal

from models.base import BaseSchema


class ProductField(str, Enum):
    """Product fields a spreadsheet column can be mapped to."""
    SKIP = ""
    NAME = "name"
    SKU = "sku"
    SLUG = "slug"
    SHORT_DESC = "shortDesc"
    LONG_DESC = "longDesc"
    PRICE = "price"
    CURRENCY = "currency"
    CATEGORY = "category"
    TAGS = "tags"
    WIDTH = "width"
    DEPTH = "depth"
    HEIGHT = "height"
    UNIT = "unit"
    FINISHES = "finishes"
    IMAGE_URLS = "image_urls"
    GLB_URL = "glb_url"
    USDZ_URL = "usdz_url"
    CAD_URLS = "cad_urls"
    AVAILABILITY = "availability"
    HOTEL_GRADE = "hotel_grade"


# Display order for the mapping UI; also the order used for suggestions
PRODUCT_FIELD_LABELS: dict[ProductField, str] = {
    ProductField.SKIP: "-- Skip --",
    ProductField.NAME: "Name",
    ProductField.SKU: "SKU",
    ProductField.SLUG: "Slug",
    ProductField.SHORT_DESC: "Short Description",
    ProductField.LONG_DESC: "Long Description",
    ProductField.PRICE: "Price",
    ProductField.CURRENCY: "Currency",
    ProductField.CATEGORY: "Category",
    ProductField.TAGS: "Tags (comma-separated)",
    ProductField.WIDTH: "Width",
    ProductField.DEPTH: "Depth",
    ProductField.HEIGHT: "Height",
    ProductField.UNIT: "Unit",
    ProductField.FINISHES: "Finishes (comma-separated)",
    ProductField.IMAGE_URLS: "Image URLs (comma-separated)",
    ProductField.GLB_URL: "GLB URL",
    ProductField.USDZ_URL: "USDZ URL",
    ProductField.CAD_URLS: "CAD URLs (comma-separated)",
    ProductField.AVAILABILITY: "Availability",
    ProductField.HOTEL_GRADE: "Hotel Grade",
}

RawRow = dict[str, Optional[str]]
FieldMapping = dict[str, ProductField]


# ===================
# MAPPED PRODUCT RECORD
# ===================

class Finish(BaseSchema):
    """Named finish with a display color."""
    name: str
    color_hex: str = "#000000"


class Dimensions(BaseSchema):
    """Product dimensions; missing measures stay None."""
    width: Optional[Decimal] = None
    depth: Optional[Decimal] = None
    height: Optional[Decimal] = None
    unit: str = "cm"


class ProductAssets(BaseSchema):
    """
    Downloadable asset URLs found in a row.

    Not sent to the CMS: asset download and attachment is not implemented,
    so these are only counted and reported as pending.
    """
    image_urls: list[str] = Field(default_factory=list)
    glb_url: Optional[str] = None
    usdz_url: Optional[str] = None
    cad_urls: list[str] = Field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of asset URLs awaiting ingestion."""
        return (
            len(self.image_urls)
            + len(self.cad_urls)
            + (1 if self.glb_url else 0)
            + (1 if self.usdz_url else 0)
        )


class ProductRecord(BaseSchema):
    """
    One spreadsheet row mapped onto the product schema.

    Built by parsers.row_mapper.map_row(); a record always has a name.
    """

    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    slug: Optional[str] = None
    short_desc: Optional[str] = None
    long_desc: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0)
    currency: str = "EUR"
    category: str = "Chair"
    tags: list[str] = Field(default_factory=list)
    dimensions: Dimensions = Field(default_factory=Dimensions)
    finishes: list[Finish] = Field(default_factory=list)
    availability: bool = True
    hotel_grade: bool = False
    assets: ProductAssets = Field(default_factory=ProductAssets)

    def to_catalog_payload(self) -> dict:
        """Convert to the CMS product create body (the "data" object)."""

        def number(value: Optional[Decimal]) -> Optional[float]:
            return float(value) if value is not None else None

        return {
            "name": self.name,
            "sku": self.sku,
            "slug": self.slug,
            "shortDesc": self.short_desc,
            "longDesc": self.long_desc,
            "price": number(self.price),
            "currency": self.currency,
            "category": self.category,
            "tags": list(self.tags),
            "dimensions": {
                "width": number(self.dimensions.width),
                "depth": number(self.dimensions.depth),
                "height": number(self.dimensions.height),
                "unit": self.dimensions.unit,
            },
            "finishes": [
                {"name": f.name, "colorHex": f.color_hex}
                for f in self.finishes
            ],
            "availability": self.availability,
            "hotel_grade": self.hotel_grade,
        }


# ===================
# IMPORT REQUEST
# ===================

class ImportRequest(BaseModel):
    """
    Start an import.

    Rows come from the client-side (or preview) CSV parse; the mapping is
    applied to every row. Field names match the admin console payload.
    """
    model_config = ConfigDict(populate_by_name=True)

    rows: list[RawRow] = Field(
        default_factory=list,
        alias="csvData",
        description="Parsed CSV rows, one dict per line"
    )
    field_mappings: FieldMapping = Field(
        default_factory=dict,
        alias="fieldMappings",
        description="CSV column -> product field ('' or 'skip' to ignore)"
    )

    @field_validator("field_mappings", mode="before")
    @classmethod
    def skip_aliases(cls, v):
        """Accept 'skip' and null as the skip sentinel."""
        if not isinstance(v, dict):
            return v
        return {
            column: "" if field in (None, "skip") else field
            for column, field in v.items()
        }


class RetryPolicy(BaseModel):
    """Whole-batch retry for a background job whose runner crashes."""
    attempts: int = Field(3, ge=1)
    backoff_seconds: float = Field(2, ge=0)

    def delay_for(self, retries_done: int) -> float:
        """Exponential backoff: backoff, 2x backoff, 4x backoff, ..."""
        return self.backoff_seconds * 2 ** retries_done


class ImportJobPayload(BaseModel):
    """Everything the worker needs to run a queued batch."""
    rows: list[RawRow]
    field_mappings: FieldMapping
    token: str
    user_id: Optional[int] = None
    retry: RetryPolicy = Field(default_factory=RetryPolicy)


# ===================
# IMPORT RESPONSES
# ===================

class JobStatus(str, Enum):
    """Lifecycle of a background import."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SyncImportResponse(BaseModel):
    """Import ran inline; the batch result is final."""
    mode: Literal["sync"] = "sync"
    success: bool = True
    processed: int
    total: int
    errors: list[str] = Field(default_factory=list)
    pending_assets: int = Field(
        0,
        description="Asset URLs recognised but not downloaded (not implemented)"
    )


class BackgroundImportResponse(BaseModel):
    """Import was queued; poll GET /api/admin/import/{id}."""
    mode: Literal["background"] = "background"
    id: str
    status: JobStatus = JobStatus.PENDING
    progress: int = 0
    total: int
    processed: int = 0
    errors: list[str] = Field(default_factory=list)


ImportStartResponse = Annotated[
    Union[SyncImportResponse, BackgroundImportResponse],
    Field(discriminator="mode"),
]


class ImportJobStatus(BaseModel):
    """Polled status of a background import."""
    id: str
    status: JobStatus
    progress: int = Field(0, ge=0, le=100)
    total: int
    processed: int = 0
    errors: list[str] = Field(default_factory=list)
    error: Optional[str] = Field(
        None,
        description="Failure reason, only present when status is failed"
    )


# ===================
# PREVIEW
# ===================

class ProductFieldOption(BaseModel):
    """Selectable mapping target."""
    value: ProductField
    label: str


class CsvPreviewResponse(BaseModel):
    """Parsed CSV ready for mapping."""
    filename: str
    headers: list[str]
    rows: list[RawRow]
    total: int
    suggested_mappings: FieldMapping
