from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from app.config.database import get_db
from app.core.auth.repository import UserRepository
from app.core.auth.service import AuthService
from app.core.auth.schemas import (
    UserLogin, UserRegister, TokenResponse, RegisterResponse,
    CurrentUserResponse, UserResponse, PartnerSummary
)
from app.core.exceptions import InvalidCredentials
from app.modules.partners.repository import PartnerRepository
from app.shared.constants import UserRole
from app.shared.database.models import User
from app.core.auth.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _partner_summary(db: Session, user: User, include_location: bool = False):
    if user.role != UserRole.DELIVERY_PARTNER.value:
        return None

    partner = PartnerRepository(db).get_by_principal(user.id)
    if partner is None:
        return None

    summary = PartnerSummary.model_validate(partner)
    if not include_location:
        summary.current_location = None
    return summary


@router.post("/login", response_model=TokenResponse)
def login(
    user_login: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login with email and password

    **Body:**
    ```json
        {
            "email": "user@example.com",
            "password": "password123"
        }
    ```

    **Returns:**
    - JWT access token valid for one hour
    - User information, plus partner profile for delivery partners
    """
    user = UserRepository(db).get_by_email(user_login.email)

    # Same answer for unknown email and wrong password
    if not user or not AuthService.verify_password(user_login.password, user.password_hash):
        logger.info(f"Failed login for {user_login.email}")
        raise InvalidCredentials()

    access_token = AuthService.create_access_token(user.id)

    return TokenResponse(
        success=True,
        message="Login successful",
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
        partner_info=_partner_summary(db, user)
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register a user account

    Delivery partner accounts created here have no partner profile;
    use `POST /admin/partners` to provision a complete partner.
    """
    repository = UserRepository(db)
    user = repository.add(
        email=user_data.email,
        password_hash=AuthService.get_password_hash(user_data.password),
        role=user_data.role.value
    )
    db.commit()
    db.refresh(user)
    logger.info(f"👤 User {user.email} registered as {user.role}")

    return RegisterResponse(
        success=True,
        message="User registered successfully",
        user=UserResponse.model_validate(user)
    )


@router.get("/me", response_model=CurrentUserResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Current user information

    **Headers requeridos:**
    - Authorization: Bearer {token}
    """
    return CurrentUserResponse(
        success=True,
        message="User retrieved",
        user=UserResponse.model_validate(current_user),
        partner_info=_partner_summary(db, current_user, include_location=True)
    )
