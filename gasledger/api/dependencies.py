"""Request-scoped dependencies for the API."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from gasledger.core.database import get_db
from gasledger.models.enums import Role
from gasledger.schemas.reading import Caller
from gasledger.services.store import ReadingStore


def get_store(db: Session = Depends(get_db)) -> ReadingStore:
    """Dependency for getting the reading store bound to this request's session."""
    return ReadingStore(db)


def get_current_caller(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Caller:
    """Identity forwarded by the authenticating gateway."""
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    try:
        role = Role(x_user_role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown role '{x_user_role}'",
        ) from None
    return Caller(id=x_user_id, role=role)


def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    """Require the privileged role."""
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this resource",
        )
    return caller
