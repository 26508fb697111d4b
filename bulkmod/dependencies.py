import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bulkmod.models import User
from bulkmod.services.modlists import ModListService
from bulkmod.tokens import InvalidTokenError, TokenIssuer

logger = logging.getLogger(__name__)


def get_db(request: Request):
    """Yield a session that commits when the endpoint returns.

    Runs with function scope so the commit, or the rollback on error, happens
    before the response is sent.
    """
    db = request.app.state.session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


DbSession = Annotated[Session, Depends(get_db, scope="function")]

security = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    issuer: Issuer,
    db: DbSession,
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
        )
    try:
        user_id = issuer.verify(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        )

    user = db.get(User, user_id)
    if user is None:
        logger.warning("Token for unknown user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found"
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_mod_list_service(db: DbSession) -> ModListService:
    return ModListService(db)


ModLists = Annotated[ModListService, Depends(get_mod_list_service)]
