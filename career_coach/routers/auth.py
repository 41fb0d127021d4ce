"""Caller identity: bearer token -> stored user.

Tokens are issued by the user-management service; this module only checks
them and loads the user they name.

PySecure-4-Minimal:
- Do not log tokens.
- Generic 401 messages that do not reveal which check failed.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from career_coach.api.deps import get_user_store
from career_coach.db.stores import UserStore
from career_coach.models.auth import MeResponse
from career_coach.models.domain import Candidate, Recruiter, User
from career_coach.security.jwt import subject_of

router = APIRouter(prefix="/auth", tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserStore = Depends(get_user_store),
) -> User:
    """Dependency to extract current user from JWT token."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        user_id = subject_of(credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = users.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_candidate(user: User = Depends(get_current_user)) -> Candidate:
    if not isinstance(user, Candidate):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Candidate access only")
    return user


def get_current_recruiter(user: User = Depends(get_current_user)) -> Recruiter:
    if not isinstance(user, Recruiter):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Recruiter access only")
    return user


# PUBLIC_INTERFACE
@router.get("/me", response_model=MeResponse, summary="Current user", description="Return the current authenticated user.")
def me(current: User = Depends(get_current_user)):
    """Return current user data."""
    return MeResponse(
        id=current.id,
        email=current.email,
        name=current.name,
        kind=current.kind,
        roadmap_id=current.roadmap_id if isinstance(current, Candidate) else None,
        company=current.company if isinstance(current, Recruiter) else None,
    )
