from datetime import datetime

from sqlalchemy import ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bulkmod.database import Base
from bulkmod.models.mod_list_mod import ModListMod

PREVIEW_SIZE = 5


class ModList(Base):
    __tablename__ = "mod_lists"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    is_public: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship(
        "User", lazy="selectin", back_populates="mod_lists"
    )

    # Newest first; id breaks ties between rows added within the same second.
    mods: Mapped[list[ModListMod]] = relationship(
        ModListMod,
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=[ModListMod.added_at.desc(), ModListMod.id.desc()],
    )

    @property
    def mod_count(self) -> int:
        return len(self.mods)

    @property
    def preview(self) -> list[ModListMod]:
        return self.mods[:PREVIEW_SIZE]
