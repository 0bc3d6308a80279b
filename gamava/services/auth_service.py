import logging

from flask_jwt_extended import create_access_token, create_refresh_token

from gamava.enums import UserRole
from gamava.exceptions import AuthenticationError, ConflictError, NotFoundError
from gamava.extensions import db
from gamava.models.user import User

logger = logging.getLogger(__name__)


def _is_usable(user) -> bool:
    return user is not None and user.is_active and not user.is_deleted


class AuthService:
    """Accounts for the admin console and storefront customers"""

    @staticmethod
    def register_user(email: str, username: str, password: str,
                      role: str = UserRole.CUSTOMER.value, full_name: str = None) -> User:
        taken = User.query.filter((User.email == email) | (User.username == username)).first()
        if taken:
            field = "Email" if taken.email == email else "Username"
            raise ConflictError(f"{field} already exists")

        user = User(email=email, username=username, role=role, full_name=full_name)
        user.set_password(password)
        return user.save()

    @staticmethod
    def issue_tokens(user: User) -> dict:
        # JWT subject must be a string
        identity = str(user.id)
        return {
            "access_token": create_access_token(identity=identity),
            "refresh_token": create_refresh_token(identity=identity),
            "user": user.to_dict(),
        }

    @staticmethod
    def login_user(username: str, password: str) -> dict:
        user = User.query.filter_by(username=username).first()
        if user is None or not user.check_password(password):
            raise AuthenticationError("Invalid credentials")
        if not _is_usable(user):
            raise AuthenticationError("Account is deactivated")

        logger.info(f"User {user.id} signed in as {user.role}")
        return AuthService.issue_tokens(user)

    @staticmethod
    def refresh_access_token(identity) -> str:
        """New access token for the subject of a valid refresh token"""
        user = AuthService.get_user_by_id(identity)
        return create_access_token(identity=str(user.id))

    @staticmethod
    def get_user_by_id(user_id) -> User:
        user = db.session.get(User, int(user_id))
        if not _is_usable(user):
            raise NotFoundError("User not found")
        return user
