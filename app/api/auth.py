from datetime import datetime, timezone
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from app.core.errors import APIError
from app.core.permissions import has_permission
from app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from app.db.database import get_db
from app.models.user import User, UserRole
from app.schemas.user import MessageResponse, Token, UserCreate, UserLogin, UserResponse, User as UserSchema
from typing import Annotated

logger = logging.getLogger(__name__)
router = APIRouter()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


def issue_token(user: User) -> str:
    return create_access_token(
        data={
            "sub": user.email,
            "id": user.id,
            "name": user.name,
            "role": UserRole(user.role).value,
        }
    )


@router.post("/register", response_model=Token)
async def register(user: UserCreate, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email).first()
    if db_user:
        raise APIError(status.HTTP_409_CONFLICT, "Email already registered", "DUPLICATE_ENTRY")

    db_user = User(
        email=user.email,
        name=user.name,
        password_hash=get_password_hash(user.password),
        role=UserRole.ANALYST,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")

    return {"user": UserSchema.model_validate(db_user), "token": issue_token(db_user)}


@router.post("/login", response_model=Token)
async def login(user_data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == user_data.email).first()
    if not user or not verify_password(user_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    return {"user": UserSchema.model_validate(user), "token": issue_token(user)}


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)], db: Session = Depends(get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise credentials_exception
    return user


def require_permission(permission: str):
    async def checker(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if not has_permission(current_user, permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
        return current_user

    return checker


@router.get("/session", response_model=UserResponse)
async def read_session(current_user: Annotated[User, Depends(get_current_user)]):
    return {"user": UserSchema.model_validate(current_user)}


@router.post("/logout", response_model=MessageResponse)
async def logout():
    # Tokens are stateless; the client discards its copy
    return {"message": "Successfully logged out"}
