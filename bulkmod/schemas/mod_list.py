from datetime import datetime

from pydantic import Field, field_validator

from bulkmod.schemas.base import CamelModel


class ModListCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    is_public: bool = False


class ModListUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    is_public: bool | None = None

    @field_validator("name", "is_public")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ModListModCreate(CamelModel):
    mod_slug: str = Field(min_length=1, max_length=255)
    mod_title: str = Field(min_length=1, max_length=255)
    mod_icon_url: str | None = None
    mod_author: str


class ModListModRemove(CamelModel):
    mod_slug: str


class ModListModRead(CamelModel):
    id: int
    mod_list_id: int
    mod_slug: str
    mod_title: str
    mod_icon_url: str | None
    mod_author: str
    added_at: datetime


class ModListOwnerRead(CamelModel):
    id: int
    username: str


class ModListRead(CamelModel):
    """A mod list without its entries, as returned by membership lookups."""

    id: int
    user_id: int
    name: str
    description: str | None
    is_public: bool
    mod_count: int
    created_at: datetime
    updated_at: datetime


class ModListSummary(ModListRead):
    """A mod list with a short preview of its most recent entries."""

    mods: list[ModListModRead] = Field(validation_alias="preview")


class PublicModListSummary(ModListSummary):
    user: ModListOwnerRead


class ModListDetail(ModListRead):
    mods: list[ModListModRead]


class ModListUpdateResponse(CamelModel):
    message: str
    mod_list: ModListDetail | None


class MembershipCheck(CamelModel):
    is_in_mod_list: bool
