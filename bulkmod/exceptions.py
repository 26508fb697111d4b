class BulkmodError(Exception):
    """Base class for domain errors raised by the service layer."""


class ModListNotFound(BulkmodError):
    def __init__(self) -> None:
        super().__init__("Mod List not found or access denied")


class PublicModListNotFound(BulkmodError):
    def __init__(self) -> None:
        super().__init__("Public mod list not found")
