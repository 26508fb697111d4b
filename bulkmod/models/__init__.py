from bulkmod.models.user import User
from bulkmod.models.mod_list import ModList
from bulkmod.models.mod_list_mod import ModListMod

__all__ = ["User", "ModList", "ModListMod"]
