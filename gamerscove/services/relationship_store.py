# Abstract Relationship Store consumed by the friendship manager.
# Concrete stores: crud/crud_friendship.py (SQL) and
# services/firestore_services/friendship_service.py (Firestore).

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional

from gamerscove.schemas import Friendship, FriendshipCreate, FriendshipStatusEnum


class RelationshipStore(ABC):
    """
    Durable storage for friendship records, keyed by record id and queryable by
    either participant. Implementations must reject a second record for the same
    unordered pair with ConflictError, even when two inserts race.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """All-or-nothing unit of work wrapping one manager operation."""

    @abstractmethod
    def insert(self, friendship_in: FriendshipCreate) -> Friendship:
        """Persists a new record and returns it with its store-assigned id."""

    @abstractmethod
    def get_by_id(self, friendship_id: str) -> Optional[Friendship]:
        pass

    @abstractmethod
    def find_by_either_participant(self, user_id: int) -> List[Friendship]:
        """Records where user_id is requester or receiver, oldest first."""

    @abstractmethod
    def find_by_receiver_and_status(self, receiver_id: int, status: FriendshipStatusEnum) -> List[Friendship]:
        pass

    @abstractmethod
    def find_by_direction_and_status(
        self, requester_id: int, receiver_id: int, status: FriendshipStatusEnum
    ) -> Optional[Friendship]:
        pass

    @abstractmethod
    def update_status(
        self, friendship_id: str, expected: FriendshipStatusEnum, new: FriendshipStatusEnum
    ) -> Optional[Friendship]:
        """
        Compare-and-set on status. Returns the updated record, or None when the record
        is gone or no longer has the expected status.
        """

    @abstractmethod
    def delete(self, friendship_id: str) -> bool:
        """Returns False when there was nothing to delete."""

    def find_by_pair(self, user_a: int, user_b: int) -> Optional[Friendship]:
        """
        Returns the record for the unordered pair {user_a, user_b}, whichever direction
        it was stored in. Stores with a normalized-pair index should override this scan.
        """
        if user_a == user_b:
            return None
        for friendship in self.find_by_either_participant(user_a):
            if friendship.involves_user(user_b):
                return friendship
        return None
