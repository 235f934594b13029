import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.api.auth import get_current_user, require_permission
from app.db.database import get_db
from app.api.filters import parse_filter
from app.models.user import User, UserRole
from app.schemas.user import RoleUpdate, UserListResponse, UserResponse, UserUpdate, User as UserSchema

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: Annotated[User, Depends(get_current_user)]):
    return {"user": UserSchema.model_validate(current_user)}


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    current_user.name = data.name
    db.commit()
    db.refresh(current_user)
    return {"user": UserSchema.model_validate(current_user)}


@router.get("", response_model=UserListResponse)
async def list_users(
    role: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("view:reports"))
):
    role_filter = parse_filter(role, UserRole, "role")
    query = db.query(User)
    if role_filter:
        query = query.filter(User.role == role_filter)
    users = query.order_by(User.created_at.desc()).all()
    return {"users": [UserSchema.model_validate(u) for u in users]}


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("view:reports"))
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": UserSchema.model_validate(user)}


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: str,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("manage:users"))
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.role = data.role
    db.commit()
    db.refresh(user)
    logger.info(f"User {current_user.id} set role of {user.id} to {data.role.value}")
    return {"user": UserSchema.model_validate(user)}
