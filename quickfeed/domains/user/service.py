# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service.

Lookups and profile updates of quickfeed users. Users and their remote
identities are created by the sign-in flow, which is not part of this
service.
"""

import logging

from quickfeed.core.errors import NotFoundError, PermissionDeniedError
from quickfeed.infrastructure.database.models import User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.user import UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    """Raised when a user does not exist."""

    pass


class UserService:
    """Service for reading and updating users."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def get_caller(self, user_id: int) -> User:
        """Load the user behind an authenticated request.

        Returns the database row, remote identities included, so that
        callers can pick the provider token they need.

        Raises:
            UserNotFoundError: If the user was removed after the token
                was issued.
        """
        user = await self._storage.users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    async def get_user(self, user_id: int) -> UserResponse:
        """Get a user by ID."""
        return UserResponse.model_validate(await self.get_caller(user_id))

    async def list_users(self) -> list[UserResponse]:
        """List all users."""
        return [UserResponse.model_validate(u) for u in await self._storage.users.list_all()]

    async def update_user(
        self,
        user_id: int,
        request: UserUpdateRequest,
        caller: User,
    ) -> UserResponse:
        """Update a user's profile.

        Args:
            user_id: User to update.
            request: Fields to change; unset fields stay as they are.
            caller: Authenticated user performing the change.

        Returns:
            The updated user.

        Raises:
            UserNotFoundError: If the user does not exist.
            PermissionDeniedError: If the caller is neither the user nor an
                admin, or a non-admin tries to change admin rights.
        """
        if caller.id != user_id and not caller.is_admin:
            raise PermissionDeniedError("Only admins can update other users")
        if request.is_admin is not None and not caller.is_admin:
            raise PermissionDeniedError("Only admins can change admin rights")

        user = await self.get_caller(user_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)

        async with self._storage.transaction():
            for field, value in changes.items():
                setattr(user, field, value)

        logger.info("User %s updated by %s: %s", user_id, caller.id, sorted(changes))
        return UserResponse.model_validate(user)
