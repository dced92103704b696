from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Iterable, Optional

from app.config.database import get_db
from app.core.auth.repository import UserRepository
from app.core.auth.service import AuthService
from app.core.exceptions import InsufficientRole, Unauthenticated
from app.modules.partners.repository import PartnerRepository
from app.shared.constants import UserRole
from app.shared.database.models import DeliveryPartner, User

security = HTTPBearer(auto_error=False)

def resolve_principal(token: Optional[str], db: Session) -> User:
    """Turn a bearer token into the user it was issued for"""
    if not token:
        raise Unauthenticated("Access token is missing")

    payload = AuthService.verify_token(token)
    if payload is None:
        raise Unauthenticated("Invalid or expired token")

    user_id = payload.get("user_id")
    if not user_id:
        raise Unauthenticated("Invalid token payload")

    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise Unauthenticated("Invalid token - user not found")

    return user

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Current user from the bearer token"""
    token = credentials.credentials if credentials else None
    return resolve_principal(token, db)

def authorize(user: Optional[User], allowed_roles: Iterable[str]) -> None:
    """Raise unless the user holds one of the allowed roles"""
    if user is None:
        raise Unauthenticated()

    allowed = {getattr(role, "value", role) for role in allowed_roles}
    if user.role not in allowed:
        raise InsufficientRole(user.role, allowed)

def require_roles(allowed_roles: Iterable[str]):
    """Build a dependency that only lets the given roles through"""
    allowed_roles = frozenset(getattr(role, "value", role) for role in allowed_roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user, allowed_roles)
        return current_user
    return role_checker

# Role-specific dependencies
get_admin_user = require_roles([UserRole.ADMIN])
get_partner_user = require_roles([UserRole.DELIVERY_PARTNER])

def get_current_partner(
    current_user: User = Depends(get_partner_user),
    db: Session = Depends(get_db)
) -> DeliveryPartner:
    """Partner profile owned by the authenticated delivery partner"""
    return PartnerRepository(db).find_by_principal(current_user.id)
