"""Parameter types shared by the GHL tool modules."""
from typing import Annotated, Literal

from pydantic import BaseModel, Field

DataType = Literal[
    "TEXT",
    "LARGE_TEXT",
    "NUMERICAL",
    "PHONE",
    "MONETORY",
    "CHECKBOX",
    "SINGLE_OPTIONS",
    "MULTIPLE_OPTIONS",
    "DATE",
    "FILE_UPLOAD",
    "RADIO",
    "EMAIL",
    "TEXTBOX_LIST",
]

AccountType = Literal["agency", "sub_account"]

LocationId = Annotated[
    str | None,
    Field(description="Override location ID (uses the default account or configured location if omitted)"),
]


class ContactFieldDefinition(BaseModel):
    """One entry of a bulk contact-field creation request."""

    name: str = Field(description="Display name")
    data_type: DataType = Field(description="Field type")
    placeholder: str | None = None
    options: list[str] | None = None
    is_required: bool | None = None
    model: str | None = None


class ObjectFieldOption(BaseModel):
    key: str
    label: str
    url: str | None = None
