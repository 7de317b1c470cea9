from typing import Optional

from fastapi import APIRouter, Depends, Response

from ..auth import get_optional_user
from ..config import settings
from ..models.user import User
from ..schemas import MutationOut, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=Optional[UserOut])
def me(user: Optional[User] = Depends(get_optional_user)):
    """The signed-in user, or null for anonymous callers."""
    return user


@router.post("/logout", response_model=MutationOut)
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"success": True}
