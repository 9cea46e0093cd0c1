"""Catalog data models.

Pydantic models mirroring the raw JSON files the catalog is built from.
Field aliases match the source keys exactly; unknown keys are kept.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Contact roles shown on record pages, in display order
CONTACT_ROLES: tuple[str, ...] = (
    "Owned By",
    "Senior Responsible Owner",
    "Delivery Manager",
    "Information Asset Owner",
)


class CategoryComponent(BaseModel):
    """A component listed under one of a record's category types."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    type: str | None = None
    name: str | None = None
    description: str | None = None


class CatalogRecord(BaseModel):
    """One product/service entry from the catalog file.

    Attributes:
        id: Stable unique identifier.
        name: Display name, the only field keyword search looks at.
        description: Long description.
        phase: Delivery phase (e.g., "Live").
        business_area: Owning business area.
        parent: Owning Group/service, also used for SubGroup matching.
        type: Record type (e.g., "Service").
        operational_status: Operational status (e.g., "Operational", "New").
        categories: Category type name -> ordered components.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    id: str = Field(min_length=1)
    name: str = Field(default="", alias="Name")
    description: str | None = Field(default=None, alias="Description")
    phase: str | None = None
    business_area: str | None = Field(default=None, alias="business-area")
    parent: str | None = Field(default=None, alias="Parent")
    type: str | None = Field(default=None, alias="Type")
    operational_status: str | None = Field(default=None, alias="Operational Status")
    categories: dict[str, list[CategoryComponent]] = Field(default_factory=dict)

    owned_by: str | None = Field(default=None, alias="Owned By")
    senior_responsible_owner: str | None = Field(
        default=None, alias="Senior Responsible Owner"
    )
    delivery_manager: str | None = Field(default=None, alias="Delivery Manager")
    information_asset_owner: str | None = Field(
        default=None, alias="Information Asset Owner"
    )
    assigned_to: str | None = Field(default=None, alias="Assigned To")
    service_desk: str | None = Field(default=None, alias="Service Desk")

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_null(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("categories", mode="before")
    @classmethod
    def _categories_mapping(cls, value: Any) -> Any:
        # Category types whose value is not a list carry no components;
        # entries that are not objects are dropped from the list
        if not isinstance(value, dict):
            return {}
        return {
            k: [c for c in v if isinstance(c, dict)]
            for k, v in value.items()
            if isinstance(v, list)
        }

    def contact_name(self, role: str) -> str | None:
        """Get the name recorded for a contact role.

        Args:
            role: Source key of the role (e.g., "Owned By").

        Returns:
            Stripped name, or None if the role is empty.
        """
        field_name = _ROLE_FIELDS.get(role)
        value = getattr(self, field_name) if field_name else None
        if not value or not value.strip():
            return None
        return value.strip()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary keyed by the source field names.

        Returns:
            Dictionary representation.
        """
        return self.model_dump(by_alias=True)


_ROLE_FIELDS: dict[str, str] = {
    field.alias: name
    for name, field in CatalogRecord.model_fields.items()
    if field.alias in CONTACT_ROLES + ("Assigned To", "Service Desk")
}


class TaxonomyEntry(BaseModel):
    """One row of the taxonomy table.

    Attributes:
        taxonomy: Vocabulary name (Group, SubGroup, Phase, Type, ...).
        item: Display label.
        slug: Optional precomputed URL token.
        parent: Owning Group label, SubGroup rows only.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    taxonomy: str = Field(alias="Taxonomy")
    item: str = Field(alias="Item")
    slug: str | None = Field(default=None, alias="Slug")
    parent: str | None = Field(default=None, alias="Parent")
