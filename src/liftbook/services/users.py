"""User accounts."""

from typing import Any

import aiosqlite
from loguru import logger

from ..db.engine import Database
from ..db.repositories import UserRepository
from ..errors import Conflict, NotFound, ValidationRejected
from ..models.user import User


class UserService:
    """Create and look up users."""

    def __init__(self, db: Database):
        self.db = db

    async def create(self, payload: Any) -> User:
        """Create a user from ``{email, name}``.

        Raises:
            ValidationRejected: If the email is missing
            Conflict: If the email is already registered
        """
        if not isinstance(payload, dict) or not payload.get("email"):
            raise ValidationRejected("'email' is required")

        user = User(email=str(payload["email"]).strip(), name=str(payload.get("name") or ""))
        try:
            async with self.db.transaction() as session:
                user.id = await UserRepository(session).create(user)
        except aiosqlite.IntegrityError as e:
            raise Conflict(f"User {user.email} already exists") from e

        logger.info(f"Created user {user.id}")
        return user

    async def get(self, user_id: int) -> User:
        """Get a user by ID.

        Raises:
            NotFound: If the user does not exist
        """
        async with self.db.session() as session:
            user = await UserRepository(session).get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user
