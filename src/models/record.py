"""Pydantic models for remote records and the create form."""

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """A user record as returned by the remote record store."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Leanne Graham",
                "email": "Sincere@april.biz",
                "username": "Bret",
            }
        },
    )

    id: int = Field(default=..., description="Unique identifier assigned by the remote store")
    name: str = Field(default=..., description="Display name")
    email: str = Field(default=..., description="Contact email address")
    username: str | None = Field(default=None, description="Machine-friendly handle")


class NewRecord(BaseModel):
    """Payload sent to the remote store's create operation."""

    name: str = Field(default=..., min_length=1, description="Display name")
    email: str = Field(default=..., min_length=1, description="Contact email address")
    username: str = Field(default=..., description="Handle derived from the name")


class PendingFormInput(BaseModel):
    """Transient text typed into the create form. Never persisted."""

    name: str = ""
    email: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.email


def derive_username(name: str) -> str:
    """Derive a handle from a display name: lowercased, spaces become underscores.

    >>> derive_username("Ann Lee")
    'ann_lee'
    """
    return name.lower().replace(" ", "_")
