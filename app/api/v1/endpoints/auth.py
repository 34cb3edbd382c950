import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_login_attempts, get_schema_probe
from app.core.config import settings
from app.core.rate_limit import LoginAttemptStore
from app.core.security import (
    create_access_token,
    get_current_account_id,
    get_password_hash,
    verify_password,
)
from app.crud import crud_account
from app.db.database import get_db
from app.db.schema_probe import SchemaProbe
from app.schemas.AuthSchemas import (
    AccountProfile,
    LoginRequest,
    LoginResponse,
    LoginUser,
    ProfilePictureRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_jwt_secret() -> None:
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    _require_jwt_secret()
    account_id = crud_account.create_account(
        db, payload.name, payload.email, get_password_hash(payload.password)
    )
    return {"message": "User registered successfully", "userId": account_id}


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    attempts: LoginAttemptStore = Depends(get_login_attempts),
):
    minutes_left = attempts.hit(payload.email)
    if minutes_left is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many login attempts. Please try again in {minutes_left} minutes.",
        )
    _require_jwt_secret()

    account = crud_account.get_account_by_email(db, payload.email)
    if account is None or not verify_password(payload.password, account["password_hash"]):
        logger.info(f"Failed login attempt for {payload.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(account["id"], account["email"])
    crud_account.touch_last_login(db, probe, account["id"])
    logger.info(f"User logged in: {account['email']}")
    return LoginResponse(
        token=token,
        user=LoginUser(id=account["id"], name=account["name"], email=account["email"]),
    )


@router.put("/profile-picture", response_model=ProfileResponse)
def update_profile_picture(
    payload: ProfilePictureRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    profile = crud_account.update_profile_picture(
        db, probe, account_id, payload.profilePictureUrl, payload.publicId
    )
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return ProfileResponse(
        message="Profile picture updated successfully",
        user=AccountProfile(**profile),
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    profile = crud_account.get_profile(db, probe, account_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return ProfileResponse(user=AccountProfile(**profile))
