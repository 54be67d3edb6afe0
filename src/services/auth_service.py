"""Username/password authentication with bcrypt hashes and JWT bearer tokens."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.config import AUTH_CONFIG
from src.db.mongodb_client import mongo_client
from src.errors import Conflict, NotFound, StoreFailure, Unauthorized, ValidationFailure
from src.models.users import User, UserProfile

logger = logging.getLogger(__name__)

# bcrypt only hashes the first 72 bytes and refuses longer input
MAX_PASSWORD_BYTES = 72


class AuthService:
    def __init__(self):
        self.collection_name = "users"
        self.secret = AUTH_CONFIG["secret"]
        self.algorithm = AUTH_CONFIG["algorithm"]
        self.token_ttl = timedelta(hours=AUTH_CONFIG["token_ttl_hours"])

    def _collection(self):
        return mongo_client.get_collection(self.collection_name)

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

    def check_password(self, password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(password.encode(), password_hash.encode())

    def sign_up(self, first_name: str, last_name: str, username: str, email: str, password: str) -> UserProfile:
        """
        Register a new user.

        Raises:
            Conflict: email or username already registered
        """
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise ValidationFailure(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        try:
            user = User(
                username=username,
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=self.hash_password(password),
            )
        except ValidationError as e:
            raise ValidationFailure(f"Invalid sign-up details: {e.errors()[0]['msg']}") from e

        users = self._collection()
        try:
            if users.find_one({"$or": [{"_id": username}, {"email": email}]}):
                raise Conflict("Username or email already registered")
            users.insert_one(user.to_document())
        except DuplicateKeyError as e:
            # Lost a race against a concurrent sign-up
            raise Conflict("Username or email already registered") from e
        except PyMongoError as e:
            logger.error(f"Error registering user {username}: {e}")
            raise StoreFailure("Error registering user", cause=e) from e

        logger.info(f"User registered with ID: {username}")
        return user.profile()

    def log_in(self, username: str, password: str) -> tuple[UserProfile, str]:
        """
        Check credentials.

        Returns:
            The user's profile and a signed bearer token
        """
        try:
            doc = self._collection().find_one({"_id": username})
        except PyMongoError as e:
            logger.error(f"Error logging in user {username}: {e}")
            raise StoreFailure("Error logging in user", cause=e) from e

        if not doc:
            raise NotFound("User not found")
        user = User.from_document(doc)
        if len(password.encode()) > MAX_PASSWORD_BYTES or not self.check_password(password, user.password):
            logger.warning(f"Invalid password for user {username}")
            raise Unauthorized("Invalid password")

        return user.profile(), self.create_token(user.profile())

    def create_token(self, profile: UserProfile) -> str:
        payload = {
            "sub": profile.username,
            "email": profile.email,
            "name": f"{profile.first_name} {profile.last_name}",
            "exp": datetime.now(timezone.utc) + self.token_ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> dict[str, Any]:
        """Decode a bearer token. Raises Unauthorized when it cannot be trusted."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise Unauthorized("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise Unauthorized("Invalid token") from e
        if not claims.get("sub"):
            raise Unauthorized("Invalid token")
        return claims


# Singleton instance
auth_service = AuthService()
