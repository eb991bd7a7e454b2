"""
Credential service: account registration and login.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from app.core.logging import get_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import NAME_MAX_LENGTH, NAME_MIN_LENGTH, Role, User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import LoginRequest, RegisterRequest
from app.services.leave_rules import normalize_text
from app.services.results import AccountResult, ErrorCode, LoginResult, ServiceError

logger = get_logger(__name__)

MISSING_CREDENTIALS = ServiceError(
    ErrorCode.INVALID_INPUT, "Name and password are required"
)


class AuthService:
    def __init__(self, session: Session) -> None:
        self.users = UserRepository(session)

    def register(self, data: RegisterRequest) -> AccountResult:
        """
        Create an account.

        The role is stored as supplied; an omitted or blank role defaults
        to "user". Passwords are stored as Argon2 hashes only.
        """
        name = normalize_text(data.name)
        if name is None or not data.password:
            return AccountResult(error=MISSING_CREDENTIALS)

        if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            return AccountResult(
                error=ServiceError(
                    ErrorCode.INVALID_INPUT,
                    f"Name must be between {NAME_MIN_LENGTH} and "
                    f"{NAME_MAX_LENGTH} characters",
                )
            )

        conflict = ServiceError(ErrorCode.CONFLICT, "User already exists")
        if self.users.get_by_name(name) is not None:
            logger.warning(f"Registration rejected, name taken: {name}")
            return AccountResult(error=conflict)

        role = normalize_text(data.role) or Role.USER.value
        try:
            account = self.users.add(
                User(name=name, password_hash=hash_password(data.password), role=role)
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            self.users.rollback()
            logger.warning(f"Registration rejected, name taken: {name}")
            return AccountResult(error=conflict)
        except SQLAlchemyError as e:
            self.users.rollback()
            logger.exception(f"Failed to register user {name}")
            return AccountResult(
                error=ServiceError(ErrorCode.INTERNAL, "Server error", detail=str(e))
            )

        logger.info(f"User registered: ID={account.id}, name={name}, role={role}")
        return AccountResult(account=account)

    def login(self, data: LoginRequest) -> LoginResult:
        """Verify credentials and issue a session token."""
        name = normalize_text(data.name)
        if name is None or not data.password:
            return LoginResult(error=MISSING_CREDENTIALS)

        account = self.users.get_by_name(name)
        if account is None:
            logger.warning(f"Login failed, unknown user: {name}")
            return LoginResult(
                error=ServiceError(ErrorCode.NOT_FOUND, f"User {name} not found")
            )

        if not verify_password(data.password, account.password_hash):
            logger.warning(f"Login failed, bad password for user: {name}")
            return LoginResult(
                error=ServiceError(ErrorCode.UNAUTHORIZED, "Invalid password")
            )

        token = create_access_token(account.id, account.role)
        logger.info(f"User logged in: ID={account.id}, name={name}")
        return LoginResult(account=account, token=token)
