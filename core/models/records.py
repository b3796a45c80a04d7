"""
Domain Record Models.

The synthetic records written into every seeded namespace, and the
document shape they take once the importer has stamped them.

Exports:
    ResourceHyperlink: Reference attached to a record
    ResourceItem: Generated domain record
    ImportDocument: Record as written (id + partition key + provenance)
"""

from datetime import datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, ConfigDict, HttpUrl, field_validator
from pydantic.alias_generators import to_camel

from .enums import ResourceSensitivity


TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 800


class ResourceHyperlink(BaseModel):
    """
    Reference attached to a record.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: HttpUrl = Field(..., description="Absolute link target")
    title: str = Field(..., min_length=1)
    description: Optional[str] = Field(default="")
    is_external: Optional[bool] = Field(default=True)
    is_trusted: Optional[bool] = Field(default=False)


class ResourceItem(BaseModel):
    """
    Generated domain record.

    Provenance (`imported_by`, `imported_on`) stays empty until the
    importer stamps it at write time. `published_*` may precede or follow
    `imported_on`; nothing links them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    tags: List[str] = Field(default_factory=list)
    sensitivity: ResourceSensitivity = Field(default=ResourceSensitivity.PUBLIC)
    references: List[ResourceHyperlink] = Field(default_factory=list)

    # Import information
    imported_by: Optional[str] = None
    imported_on: Optional[datetime] = None

    # Publishing information
    published_by: Optional[str] = None
    published_on: Optional[datetime] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


class ImportDocument(ResourceItem):
    """
    A record as written to a namespace.

    `id` is system generated and distinct from every domain field.
    `file_path` carries the partition key (the import source location)
    and serializes as `filePath` to match the container's key path.
    """

    id: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    imported_by: str = Field(..., min_length=1)
    imported_on: datetime

    @classmethod
    def from_record(
        cls,
        record: ResourceItem,
        item_id: str,
        partition_key: str,
        imported_by: str,
        imported_on: datetime,
    ) -> "ImportDocument":
        """Stamp a generated record for writing."""
        data = record.model_dump()
        data.update(
            id=item_id,
            file_path=partition_key,
            imported_by=imported_by,
            imported_on=imported_on,
        )
        return cls(**data)

    def to_item(self) -> Dict[str, Any]:
        """JSON-safe body with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
