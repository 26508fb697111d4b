from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from bulkmod.database import Base


class ModListMod(Base):
    __tablename__ = "mod_list_mods"
    __table_args__ = (
        UniqueConstraint(
            "mod_list_id", "mod_slug", name="uq_mod_list_mods_list_slug"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    mod_list_id: Mapped[int] = mapped_column(
        ForeignKey("mod_lists.id", ondelete="CASCADE")
    )
    mod_slug: Mapped[str] = mapped_column(String(255))
    mod_title: Mapped[str] = mapped_column(String(255))
    mod_icon_url: Mapped[str | None] = mapped_column(String(2048), default=None)
    mod_author: Mapped[str] = mapped_column(String(255))
    added_at: Mapped[datetime] = mapped_column(server_default=func.now())
