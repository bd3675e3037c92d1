"""
User lifecycle management for Fixing Maritime backend.
Admin user management, admin promotion/demotion, and customer self-service.
"""
from typing import List, Optional
import logging

from database import Store
from errors import (
    ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError
)
from models.enums import UserRole, UserStatusAction
from models.schemas import (
    Actor, User, UserCreate, UserUpdate, AdminCreate, SignupRequest,
    ProfileUpdate, ChangePasswordRequest
)
from services import policy
from services.auth_service import hash_password, verify_password
from services.verification_store import VerificationTokenStore
from utils.helpers import normalize_email, public_user, utc_now

logger = logging.getLogger(__name__)

ADMIN_ROLES = [UserRole.sub_admin.value, UserRole.admin.value, UserRole.super_admin.value]
PROFILE_FIELDS = ("name", "company", "phone", "address", "city", "country")


async def _get_or_404(store: Store, user_id: str) -> dict:
    user = await store.find_one("users", {"id": user_id})
    if not user:
        raise NotFoundError("User not found")
    return user


async def _ensure_email_free(store: Store, email: str):
    if await store.find_one("users", {"email": email}):
        raise ConflictError("User with this email already exists")


async def _with_stats(store: Store, user: dict) -> dict:
    orders = await store.find("orders", {"user_id": user["id"]}, sort=[("created_at", -1)])
    result = public_user(user)
    result["order_count"] = len(orders)
    result["total_spent"] = sum(o.get("amount", 0) for o in orders if o.get("payment_status") == "paid")
    result["last_order_date"] = orders[0]["created_at"] if orders else None
    return result


# ============ ADMIN USER MANAGEMENT ============

async def list_users(store: Store, actor: Actor, role: Optional[str] = None) -> List[dict]:
    query = {"role": role} if role else {}
    users = await store.find("users", query, sort=[("created_at", -1)])
    return [
        await _with_stats(store, user)
        for user in users
        if policy.can_view(actor, user.get("role"))
    ]


async def get_user(store: Store, actor: Actor, user_id: str) -> dict:
    user = await _get_or_404(store, user_id)
    if not policy.can_view(actor, user.get("role")):
        raise AuthorizationError("Forbidden")
    return await _with_stats(store, user)


async def create_user(store: Store, actor: Actor, data: UserCreate) -> dict:
    if not policy.can_create_users(actor):
        raise AuthorizationError("Unauthorized to create users")
    if not policy.can_assign_role(actor, data.role):
        raise AuthorizationError("Insufficient permissions to create user with this role")

    email = normalize_email(data.email)
    await _ensure_email_free(store, email)

    user = User(
        **data.model_dump(exclude={"password", "email"}),
        email=email,
        password_hash=hash_password(data.password),
    )
    doc = await store.insert_one("users", user.model_dump())
    logger.info(f"User {email} ({user.role}) created by {actor.email}")
    return public_user(doc)


async def update_user(store: Store, actor: Actor, user_id: str, data: UserUpdate) -> dict:
    existing = await _get_or_404(store, user_id)

    if not policy.can_edit(actor, existing.get("role")):
        raise AuthorizationError("Insufficient permissions to edit this user")

    changes = data.model_dump(exclude_unset=True, exclude={"password"})

    new_role = changes.get("role")
    if new_role is not None:
        new_role = new_role.value if isinstance(new_role, UserRole) else new_role
        changes["role"] = new_role
        if new_role == existing.get("role"):
            changes.pop("role")
        elif not policy.can_change_role(actor):
            raise AuthorizationError("Only super admins can change user roles")
        elif actor.id == existing["id"]:
            raise AuthorizationError("Cannot change your own role")

    verified = changes.get("email_verified")
    if verified is not None and verified != existing.get("email_verified"):
        action = UserStatusAction.activate if verified else UserStatusAction.suspend
        if not verified and actor.id == existing["id"]:
            raise AuthorizationError("Cannot deactivate your own account")
        if not policy.can_set_user_status(actor, existing.get("role"), action, existing["id"]):
            raise AuthorizationError("Insufficient permissions to modify this user status")

    if changes.get("email") is not None:
        changes["email"] = normalize_email(changes["email"])
        if changes["email"] != existing["email"]:
            if await store.find_one("users", {"email": changes["email"]}):
                raise ConflictError("Email already exists")

    if data.password:
        changes["password_hash"] = hash_password(data.password)

    changes["updated_at"] = utc_now()
    user = await store.update_one("users", {"id": user_id}, changes)
    logger.info(f"User {user_id} updated by {actor.email}: {sorted(k for k in changes if k != 'password_hash')}")
    return public_user(user)


async def delete_user(store: Store, actor: Actor, user_id: str) -> dict:
    user = await _get_or_404(store, user_id)

    if not policy.can_delete(actor, user.get("role"), user["id"]):
        raise AuthorizationError("Insufficient permissions to delete this user")

    order_count = await store.count("orders", {"user_id": user_id})
    if order_count > 0:
        raise ConflictError(
            f"Cannot delete user with {order_count} dependent orders. Consider deactivating instead."
        )

    await store.delete_one("users", {"id": user_id})
    logger.info(f"User {user['email']} deleted by {actor.email}")
    return {"message": "User deleted successfully"}


async def set_user_status(store: Store, actor: Actor, user_id: str, action: str) -> dict:
    if action not in [a.value for a in UserStatusAction]:
        raise ValidationError('Invalid action. Use "activate" or "suspend"')
    if not policy.can_approve_users(actor):
        raise AuthorizationError("Unauthorized to manage user status")

    user = await _get_or_404(store, user_id)

    if action == UserStatusAction.suspend.value:
        if user.get("role") == UserRole.super_admin.value:
            raise AuthorizationError("Cannot suspend super admin users")
        if user["id"] == actor.id:
            raise AuthorizationError("Cannot suspend your own account")

    if not policy.can_set_user_status(actor, user.get("role"), action, user["id"]):
        raise AuthorizationError("Insufficient permissions to modify this user status")

    updated = await store.update_one(
        "users",
        {"id": user_id},
        {"email_verified": action == UserStatusAction.activate.value, "updated_at": utc_now()},
    )
    verb = "activated" if action == UserStatusAction.activate.value else "suspended"
    logger.info(f"User {user['email']} {verb} by {actor.email}")
    return {"user": public_user(updated), "message": f"User {verb} successfully"}


# ============ ADMIN ROLE MANAGEMENT ============

async def list_admins(store: Store, actor: Actor) -> List[dict]:
    admins = await store.find("users", {"role": {"$in": ADMIN_ROLES}}, sort=[("created_at", -1)])
    return [public_user(a) for a in admins if policy.can_view(actor, a.get("role"))]


async def create_admin(store: Store, actor: Actor, data: AdminCreate) -> dict:
    if not policy.can_manage_admins(actor):
        raise AuthorizationError("Super admin privileges required")
    if data.role.value not in ADMIN_ROLES:
        raise ValidationError("Role must be one of: " + ", ".join(ADMIN_ROLES))

    email = normalize_email(data.email)
    await _ensure_email_free(store, email)

    user = User(
        **data.model_dump(exclude={"password", "email"}),
        email=email,
        password_hash=hash_password(data.password),
    )
    doc = await store.insert_one("users", user.model_dump())
    logger.info(f"Admin {email} ({user.role}) created by {actor.email}")
    return public_user(doc)


async def remove_admin(store: Store, actor: Actor, user_id: str) -> dict:
    if not policy.can_manage_admins(actor):
        raise AuthorizationError("Access denied. Super admin privileges required.")
    if not policy.can_manage_admins(actor, user_id):
        raise AuthorizationError("Cannot remove your own admin privileges")

    user = await _get_or_404(store, user_id)
    if user.get("role") == UserRole.super_admin.value:
        raise AuthorizationError("Cannot modify super admin users")
    if user.get("role") not in ADMIN_ROLES:
        raise ValidationError("User does not have admin privileges")

    updated = await store.update_one(
        "users", {"id": user_id}, {"role": UserRole.customer.value, "updated_at": utc_now()}
    )
    logger.info(f"Admin privileges removed from {updated['email']} by {actor.email}")
    return public_user(updated)


# ============ SELF SERVICE ============

async def signup(store: Store, tokens: VerificationTokenStore, data: SignupRequest) -> dict:
    email = normalize_email(data.email)
    await _ensure_email_free(store, email)

    user = User(
        name=data.name,
        email=email,
        company=data.company,
        phone=data.phone,
        password_hash=hash_password(data.password),
        role=UserRole.customer,
        email_verified=False,
    )
    doc = await store.insert_one("users", user.model_dump())
    token = await tokens.issue(email)
    # Email delivery is external; the link is logged for the mailer to pick up
    logger.info(f"Verification link for {email}: /verify-email?token={token}")
    return public_user(doc)


async def verify_email(store: Store, tokens: VerificationTokenStore, token: str) -> dict:
    email = await tokens.consume(token)
    if not email:
        raise ValidationError("Invalid or expired verification token")
    user = await store.update_one(
        "users", {"email": email}, {"email_verified": True, "updated_at": utc_now()}
    )
    if not user:
        raise NotFoundError("User not found")
    logger.info(f"Email verified for {email}")
    return public_user(user)


async def resend_verification(store: Store, tokens: VerificationTokenStore, email: str) -> dict:
    email = normalize_email(email)
    user = await store.find_one("users", {"email": email})
    if user and not user.get("email_verified"):
        token = await tokens.issue(email)
        logger.info(f"Verification link for {email}: /verify-email?token={token}")
    return {"message": "If the account exists and is unverified, a new verification email has been sent"}


async def get_profile(store: Store, actor: Actor) -> dict:
    user = await store.find_one("users", {"id": actor.id})
    if not user:
        raise AuthenticationError("User not found")
    return public_user(user)


async def update_profile(store: Store, actor: Actor, data: ProfileUpdate) -> dict:
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if k in PROFILE_FIELDS}
    changes["updated_at"] = utc_now()
    user = await store.update_one("users", {"id": actor.id}, changes)
    if not user:
        raise AuthenticationError("User not found")
    return public_user(user)


async def change_password(store: Store, actor: Actor, data: ChangePasswordRequest) -> dict:
    user = await store.find_one("users", {"id": actor.id})
    if not user:
        raise AuthenticationError("User not found")
    if not verify_password(data.current_password, user.get("password_hash")):
        raise ValidationError("Current password is incorrect")
    await store.update_one(
        "users",
        {"id": actor.id},
        {"password_hash": hash_password(data.new_password), "updated_at": utc_now()},
    )
    logger.info(f"Password changed for {user['email']}")
    return {"message": "Password changed successfully"}
