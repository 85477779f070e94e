# zbank/api/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from zbank.core.security import get_current_user
from zbank.models.user import User
from zbank.schemas.user import DeleteAccountRequest, UserOut
from zbank.services.user_service import UserService, get_user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/search", response_model=List[UserOut])
def search_users(
    q: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return users.search(q, exclude_user_id=current_user.id)


@router.delete("/delete")
def delete_user(
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    users.delete(current_user)
    return {"message": "Account deleted successfully"}


@router.post("/delete-account")
def delete_account(
    request: DeleteAccountRequest,
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    users.delete_with_password(current_user, request.password)
    return {"message": "Account deleted successfully"}
