"""
Authentication API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.services.auth_service import AuthService, EmailTakenError
from storefront.services.referral_service import get_pending_referral
from storefront.schemas.user import UserRegister, UserLogin, ProfileResponse
from storefront.schemas.common import RefreshTokenRequest

router = APIRouter()


@router.post("/register", response_model=dict, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Register new account

    - **email**: Login email (unique)
    - **password**: Password (min 6 characters)
    - **full_name**: Optional display name
    - **referral_code**: Optional affiliate code, defaults to the code captured from a ?ref= link
    """
    try:
        user = AuthService.create_user(
            db=db,
            email=user_data.email,
            password=user_data.password,
            full_name=user_data.full_name,
            referral_code=user_data.referral_code or get_pending_referral(request)
        )
    except EmailTakenError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    tokens = AuthService.create_tokens(user)

    return {
        "ok": True,
        "message": "User registered successfully.",
        "data": {
            "user": ProfileResponse.model_validate(user).model_dump(),
            "tokens": tokens
        }
    }


@router.post("/login", response_model=dict)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login with email and password

    Returns JWT access token and refresh token
    """
    user = AuthService.authenticate_user(
        db=db,
        email=credentials.email,
        password=credentials.password
    )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    tokens = AuthService.create_tokens(user)

    return {
        "ok": True,
        "message": "Login successful",
        "data": {
            "user": ProfileResponse.model_validate(user).model_dump(),
            "tokens": tokens
        }
    }


@router.post("/refresh", response_model=dict)
async def refresh_token(token_data: RefreshTokenRequest):
    """Get a new access token from a refresh token"""
    new_access_token = AuthService.refresh_access_token(token_data.refresh_token)

    if not new_access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    return {
        "ok": True,
        "data": {
            "access_token": new_access_token,
            "token_type": "bearer"
        }
    }
