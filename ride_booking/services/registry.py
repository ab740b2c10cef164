"""
Entity Registry: identity resolution for users and rides.
"""

import logging
from typing import Dict, List, Optional

from ride_booking.core.exceptions import (
    DuplicateUserError,
    InvalidReferenceError,
    NotFoundError,
    RoleMismatchError,
)
from ride_booking.models.ride import Ride, RideStatus
from ride_booking.models.user import User, UserRole

logger = logging.getLogger(__name__)

class EntityRegistry:
    """Owns the user-id -> User and ride-id -> Ride mappings.

    Listing methods return new lists; mutating them does not touch the
    registry.
    """

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._rides: Dict[str, Ride] = {}

    # ===================== Users =====================

    def register_user(self, user: User) -> User:
        """Add a new user.

        Raises:
            DuplicateUserError: If the id is already registered
        """
        existing = self._users.get(user.user_id)
        if existing is not None:
            raise DuplicateUserError(
                f"User id {user.user_id} is already taken by a {existing.role.value}"
            )
        self._users[user.user_id] = user
        logger.info(f"User registered: {user.user_id} ({user.role.value})")
        return user

    def find_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def resolve(self, user_id: str, role: UserRole) -> User:
        """Look up an operation's actor, checking its role."""
        user = self._users.get(user_id)
        if user is None:
            raise InvalidReferenceError(f"No user with id {user_id}")
        if user.role != role:
            raise RoleMismatchError(
                f"User {user_id} is a {user.role.value}, expected a {role.value}"
            )
        return user

    def all_users(self) -> List[User]:
        return list(self._users.values())

    def users_by_role(self, role: UserRole) -> List[User]:
        return [user for user in self._users.values() if user.role == role]

    def passengers(self) -> List[User]:
        return self.users_by_role(UserRole.PASSENGER)

    def drivers(self) -> List[User]:
        return self.users_by_role(UserRole.DRIVER)

    # ===================== Rides =====================

    def add_ride(self, ride: Ride) -> Ride:
        self._rides[ride.ride_id] = ride
        return ride

    def get_ride(self, ride_id: str) -> Ride:
        ride = self._rides.get(ride_id)
        if ride is None:
            raise NotFoundError(f"Ride {ride_id} not found")
        return ride

    def all_rides(self) -> List[Ride]:
        return list(self._rides.values())

    def rides_for_user(self, user_id: str, status: Optional[RideStatus] = None) -> List[Ride]:
        return [
            ride for ride in self._rides.values()
            if ride.involves(user_id) and (status is None or ride.status == status)
        ]

    def __len__(self):
        return len(self._users) + len(self._rides)
