from datetime import datetime

from bulkmod.schemas.base import CamelModel


class UserRead(CamelModel):
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime
