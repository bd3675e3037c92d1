"""
Authentication routes for Fixing Maritime backend.
Admin cookie sessions plus customer signup, login and self-service.
"""
from fastapi import APIRouter, Response, Depends
import logging

from config import (
    ADMIN_COOKIE_NAME, ADMIN_TOKEN_HOURS, SESSION_COOKIE_NAME, SESSION_DAYS, IS_PRODUCTION
)
from database import Store
from dependencies import (
    get_store, get_verification_store, get_current_admin, get_current_customer
)
from models.schemas import (
    Actor, LoginRequest, SignupRequest, VerifyEmailRequest, ResendVerificationRequest,
    ChangePasswordRequest, ProfileUpdate
)
from services import user_service
from services.auth_service import (
    authenticate_admin, authenticate_customer, create_admin_token, create_session_token
)
from services.verification_store import VerificationTokenStore
from utils.helpers import public_user

router = APIRouter()
logger = logging.getLogger(__name__)


def _set_cookie(response: Response, key: str, value: str, max_age: int):
    response.set_cookie(
        key=key,
        value=value,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
        path="/",
        max_age=max_age,
    )


# ============ ADMIN AUTH ============

@router.post("/admin/auth/login")
async def admin_login(data: LoginRequest, response: Response, store: Store = Depends(get_store)):
    """Login to the admin back office with email and password"""
    logger.info(f"Admin login attempt for email: {data.email}")
    user = await authenticate_admin(store, data.email, data.password)

    _set_cookie(response, ADMIN_COOKIE_NAME, create_admin_token(user), ADMIN_TOKEN_HOURS * 60 * 60)

    logger.info(f"Admin login successful for email: {user['email']}")
    return {
        "message": "Login successful",
        "user": {
            "id": user["id"],
            "email": user["email"],
            "name": user.get("name"),
            "role": user["role"],
        },
    }


@router.post("/admin/auth/logout")
async def admin_logout(response: Response):
    """Clear the admin session cookie"""
    response.delete_cookie(key=ADMIN_COOKIE_NAME, path="/")
    return {"message": "Logged out successfully"}


@router.get("/admin/auth/me")
async def admin_me(admin: Actor = Depends(get_current_admin), store: Store = Depends(get_store)):
    """Get the logged-in admin's profile"""
    return await user_service.get_profile(store, admin)


@router.post("/admin/auth/change-password")
async def admin_change_password(
    data: ChangePasswordRequest,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    return await user_service.change_password(store, admin, data)


@router.put("/admin/auth/profile")
async def admin_update_profile(
    data: ProfileUpdate,
    admin: Actor = Depends(get_current_admin),
    store: Store = Depends(get_store),
):
    return await user_service.update_profile(store, admin, data)


# ============ CUSTOMER AUTH ============

@router.post("/auth/signup", status_code=201)
async def signup(
    data: SignupRequest,
    store: Store = Depends(get_store),
    tokens: VerificationTokenStore = Depends(get_verification_store),
):
    """Register a customer account; the account stays inactive until the email is verified"""
    user = await user_service.signup(store, tokens, data)
    return {
        "message": "Account created. Please check your email to verify your address.",
        "user": user,
    }


@router.post("/auth/login")
async def login(data: LoginRequest, response: Response, store: Store = Depends(get_store)):
    """Login with email and password"""
    logger.info(f"Login attempt for email: {data.email}")
    user = await authenticate_customer(store, data.email, data.password)

    token = create_session_token(user)
    _set_cookie(response, SESSION_COOKIE_NAME, token, SESSION_DAYS * 24 * 60 * 60)

    logger.info(f"Login successful for email: {user['email']}")
    return {"token": token, "user": public_user(user)}


@router.post("/auth/logout")
async def logout(response: Response):
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return {"message": "Logged out successfully"}


@router.get("/auth/me")
async def me(user: Actor = Depends(get_current_customer), store: Store = Depends(get_store)):
    """Get current user info"""
    return await user_service.get_profile(store, user)


@router.put("/auth/profile")
async def update_profile(
    data: ProfileUpdate,
    user: Actor = Depends(get_current_customer),
    store: Store = Depends(get_store),
):
    return await user_service.update_profile(store, user, data)


@router.post("/auth/verify-email")
async def verify_email(
    data: VerifyEmailRequest,
    store: Store = Depends(get_store),
    tokens: VerificationTokenStore = Depends(get_verification_store),
):
    user = await user_service.verify_email(store, tokens, data.token)
    return {"message": "Email verified successfully", "user": user}


@router.post("/auth/resend-verification")
async def resend_verification(
    data: ResendVerificationRequest,
    store: Store = Depends(get_store),
    tokens: VerificationTokenStore = Depends(get_verification_store),
):
    return await user_service.resend_verification(store, tokens, data.email)
