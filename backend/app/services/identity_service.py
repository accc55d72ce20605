"""
Identity Service
User management, registration and login

Passwords are stored only as bcrypt hashes; tokens carry {userId, isAdmin}.
"""
import logging
from typing import List, Optional

from passlib.context import CryptContext

from app.core.auth import build_password_context, issue_token
from app.core.config import Settings
from app.core.database import Database
from app.core.exceptions import InvalidCredentialsError, NotFoundError
from app.core.identifiers import parse_id
from app.domain.user import LoginResponse, User, UserCreate, UserUpdate
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class IdentityService:

    def __init__(
        self,
        db: Database,
        settings: Settings,
        users: Optional[UserRepository] = None,
        pwd_context: Optional[CryptContext] = None,
    ):
        self.db = db
        self.settings = settings
        self.users = users or UserRepository(db)
        self.pwd_context = pwd_context or build_password_context(settings.PWD_SALT)

    def list_users(self) -> List[User]:
        return [record.public() for record in self.users.find_all()]

    def get_user(self, user_id: str) -> User:
        record = self.users.find_by_id(parse_id(user_id, "User"))
        if not record:
            raise NotFoundError("The user with given ID was not found")
        return record.public()

    def create_user(self, data: UserCreate) -> User:
        """Create a user; the plaintext password is hashed and discarded"""
        fields = data.model_dump(exclude={"password"})
        fields["password_hash"] = self.pwd_context.hash(data.password)

        record = self.users.create(fields)
        logger.info(f"Created user {record.id} (admin={record.is_admin})")
        return record.public()

    def register(self, data: UserCreate) -> User:
        """Public sign-up: same as create_user but can never grant admin"""
        return self.create_user(data.model_copy(update={"is_admin": False}))

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        """
        Update a user

        Supplied fields overwrite. Without a new password the stored hash is
        kept exactly as it is.
        """
        parsed_id = parse_id(user_id, "User")
        fields = data.model_dump(exclude={"password"})
        if data.password:
            fields["password_hash"] = self.pwd_context.hash(data.password)

        record = self.users.update(parsed_id, fields)
        if not record:
            raise NotFoundError("the user can not be updated")
        return record.public()

    def delete_user(self, user_id: str) -> None:
        if not self.users.delete(parse_id(user_id, "User")):
            raise NotFoundError("user not found")
        logger.info(f"Deleted user {user_id}")

    def count_users(self) -> int:
        return self.users.count()

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Verify credentials and issue a 1-day access token

        Raises:
            NotFoundError: no user with this email
            InvalidCredentialsError: wrong password
        """
        record = self.users.find_by_email(email)
        if not record:
            raise NotFoundError("The user not found")

        if not self.pwd_context.verify(password, record.password_hash):
            logger.info(f"Failed login for user {record.id}")
            raise InvalidCredentialsError("Password is Wrong")

        token = issue_token(str(record.id), record.is_admin, self.settings)
        logger.info(f"User {record.id} logged in")
        return LoginResponse(user=record.email, token=token)
