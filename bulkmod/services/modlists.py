import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from bulkmod.exceptions import ModListNotFound, PublicModListNotFound
from bulkmod.models.mod_list import ModList
from bulkmod.models.mod_list_mod import ModListMod

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


class ModListService:
    """Owner-scoped operations on mod lists and their entries.

    Mutations filter on ``user_id`` in the same statement that changes rows, so
    a request against someone else's list simply matches nothing.
    """

    UPDATABLE_FIELDS = frozenset({"name", "description", "is_public"})

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(
        self,
        user_id: int,
        name: str,
        description: str | None = None,
        is_public: bool = False,
    ) -> ModList:
        mod_list = ModList(
            user_id=user_id,
            name=name,
            description=description,
            is_public=is_public,
        )
        self.db.add(mod_list)
        self.db.flush()
        self.db.refresh(mod_list)
        logger.info("User %s created mod list %s", user_id, mod_list.id)
        return mod_list

    def list_for_user(self, user_id: int) -> list[ModList]:
        return self.db.execute(
            select(ModList)
            .where(ModList.user_id == user_id)
            .order_by(ModList.updated_at.desc(), ModList.id.desc())
        ).scalars().all()

    def list_public(self) -> list[ModList]:
        return self.db.execute(
            select(ModList)
            .where(ModList.is_public.is_(True))
            .order_by(ModList.updated_at.desc(), ModList.id.desc())
        ).scalars().all()

    def get(self, list_id: int, user_id: int) -> ModList | None:
        return self.db.execute(
            select(ModList)
            .where(ModList.id == list_id, ModList.user_id == user_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def update(self, list_id: int, user_id: int, **fields) -> int:
        """Apply ``fields`` to an owned list.

        Returns:
            The number of rows matched. Zero means the list is missing or
            belongs to someone else; the two cases are indistinguishable.
            With no fields the owned list counts as matched.
        """
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if not fields:
            owned = self.db.execute(
                select(ModList.id).where(
                    ModList.id == list_id, ModList.user_id == user_id
                )
            ).scalar_one_or_none()
            return 0 if owned is None else 1
        result = self.db.execute(
            update(ModList)
            .where(ModList.id == list_id, ModList.user_id == user_id)
            .values(**fields)
        )
        return result.rowcount

    def delete(self, list_id: int, user_id: int) -> int:
        result = self.db.execute(
            delete(ModList).where(
                ModList.id == list_id, ModList.user_id == user_id
            )
        )
        if result.rowcount:
            logger.info("User %s deleted mod list %s", user_id, list_id)
        return result.rowcount

    def _require_owned(self, list_id: int, user_id: int) -> ModList:
        mod_list = self.db.execute(
            select(ModList).where(
                ModList.id == list_id, ModList.user_id == user_id
            )
        ).scalar_one_or_none()
        if mod_list is None:
            raise ModListNotFound()
        return mod_list

    def add_member(
        self,
        list_id: int,
        user_id: int,
        *,
        slug: str,
        title: str,
        author: str,
        icon_url: str | None = None,
    ) -> ModListMod:
        """Add a mod to an owned list.

        Raises:
            ModListNotFound: if the list is missing or not owned by ``user_id``.
            sqlalchemy.exc.IntegrityError: if ``slug`` is already in the list.
        """
        mod_list = self._require_owned(list_id, user_id)
        entry = ModListMod(
            mod_list_id=list_id,
            mod_slug=slug,
            mod_title=title,
            mod_icon_url=icon_url,
            mod_author=author,
        )
        self.db.add(entry)
        self.db.flush()
        self.db.refresh(entry)
        self.db.expire(mod_list, ["mods"])
        return entry

    def remove_member(self, list_id: int, user_id: int, slug: str) -> int:
        mod_list = self._require_owned(list_id, user_id)
        result = self.db.execute(
            delete(ModListMod).where(
                ModListMod.mod_list_id == list_id,
                ModListMod.mod_slug == slug,
            )
        )
        self.db.expire(mod_list, ["mods"])
        return result.rowcount

    def is_member(self, list_id: int, slug: str) -> bool:
        entry_id = self.db.execute(
            select(ModListMod.id).where(
                ModListMod.mod_list_id == list_id,
                ModListMod.mod_slug == slug,
            )
        ).scalar_one_or_none()
        return entry_id is not None

    def list_containing(self, user_id: int, slug: str) -> list[ModList]:
        return self.db.execute(
            select(ModList)
            .where(
                ModList.user_id == user_id,
                ModList.mods.any(ModListMod.mod_slug == slug),
            )
            .order_by(ModList.updated_at.desc(), ModList.id.desc())
        ).scalars().all()

    def copy_public(self, source_id: int, user_id: int) -> ModList:
        """Copy a public list into ``user_id``'s account as a private list.

        The copy and its entries are written in the caller's transaction, so
        a failure part way through leaves nothing behind once rolled back.

        Raises:
            PublicModListNotFound: if ``source_id`` is missing or private.
        """
        source = self.db.execute(
            select(ModList).where(
                ModList.id == source_id, ModList.is_public.is_(True)
            )
        ).scalar_one_or_none()
        if source is None:
            raise PublicModListNotFound()

        duplicate = ModList(
            user_id=user_id,
            name=f"{source.name}{COPY_SUFFIX}",
            description=source.description,
            is_public=False,
        )
        self.db.add(duplicate)
        self.db.flush()

        rows = [
            {
                "mod_list_id": duplicate.id,
                "mod_slug": mod.mod_slug,
                "mod_title": mod.mod_title,
                "mod_icon_url": mod.mod_icon_url,
                "mod_author": mod.mod_author,
            }
            for mod in source.mods
        ]
        if rows:
            self.db.execute(insert(ModListMod), rows)

        logger.info(
            "User %s copied public mod list %s as %s (%d mods)",
            user_id,
            source_id,
            duplicate.id,
            len(rows),
        )
        return self.get(duplicate.id, user_id)
