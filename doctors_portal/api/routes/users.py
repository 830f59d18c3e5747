from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...core.security import TokenPayload, UserRole
from ...api.deps import get_current_user_token, get_admin_token, rate_limit_check
from ...services.user_service import UserService
from ...schemas.base import DeleteResult, UpdateResult
from ...schemas.user import (
    UserUpsert, UserResponse, UserEmailRequest,
    TokenIssueResponse, AdminStatusResponse
)

router = APIRouter(tags=["Users"])

@router.put("/getToken/{email}", response_model=TokenIssueResponse)
async def get_token(
    email: str,
    user_data: UserUpsert,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Create or update the user and issue an access token."""
    return UserService(db).issue_token(email, user_data)

@router.get("/allusers", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_current_user_token)
):
    """List all users."""
    return UserService(db).list_users()

@router.get("/isadmin", response_model=AdminStatusResponse)
async def is_admin(email: Optional[str] = None, db: Session = Depends(get_db)):
    if not email:
        return AdminStatusResponse(is_admin=False)
    return AdminStatusResponse(is_admin=UserService(db).is_admin(email))

# Admin routes
@router.put("/admin/user", response_model=UpdateResult)
async def make_admin(
    request_data: UserEmailRequest,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    """Grant the admin role to a user."""
    return UserService(db).set_role(request_data.email, UserRole.ADMIN)

@router.put("/admin/user/demote", response_model=UpdateResult)
async def remove_admin(
    request_data: UserEmailRequest,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    """Clear a user's role, keeping the account."""
    return UserService(db).set_role(request_data.email, None)

@router.delete("/delete/user", response_model=DeleteResult)
async def delete_user(
    request_data: UserEmailRequest,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    """Delete a user record."""
    return UserService(db).delete_user(request_data.email)
