import logging
from typing import List, Optional

from gamerscove.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from gamerscove.core.log import log_operation
from gamerscove.schemas import Friendship, FriendshipCreate, FriendshipStatusEnum
from gamerscove.services.relationship_store import RelationshipStore

logger = logging.getLogger(__name__)


class FriendshipManager:
    """
    Owns the friend-request rules: who may send, accept, decline or remove a
    relationship, and which transitions are legal (pending -> accepted | declined).

    Every mutating operation runs inside one store transaction. Guards are
    evaluated on the loaded record before anything is written.
    """

    def __init__(self, store: RelationshipStore):
        self.store = store

    # --- Commands ---

    @log_operation("send_friend_request")
    def send_friend_request(self, requester_id: int, receiver_id: int) -> Friendship:
        if requester_id == receiver_id:
            raise InvalidArgumentError("Cannot send friend request to yourself")

        with self.store.transaction():
            existing = self._find_existing_friendship(requester_id, receiver_id)
            if existing:
                raise ConflictError(
                    f"Friendship already exists with status: {existing.status.value}",
                    existing_status=existing.status.value,
                )
            # A racing request for the same pair is rejected by the store itself.
            return self.store.insert(
                FriendshipCreate(requester_id=requester_id, receiver_id=receiver_id)
            )

    @log_operation("accept_friend_request")
    def accept_friend_request(self, friendship_id: str, acting_user_id: int) -> Friendship:
        return self._respond(friendship_id, acting_user_id, FriendshipStatusEnum.ACCEPTED)

    @log_operation("decline_friend_request")
    def decline_friend_request(self, friendship_id: str, acting_user_id: int) -> Friendship:
        return self._respond(friendship_id, acting_user_id, FriendshipStatusEnum.DECLINED)

    @log_operation("remove_friendship")
    def remove_friendship(self, friendship_id: str, acting_user_id: int) -> None:
        """Deletes the record in any status: cancels a pending request or unfriends."""
        with self.store.transaction():
            friendship = self._get_or_raise(friendship_id)
            if not friendship.involves_user(acting_user_id):
                raise ForbiddenError(
                    f"User {acting_user_id} is not part of friendship {friendship_id}"
                )
            if not self.store.delete(friendship_id):
                # Someone else removed it between our read and our delete.
                raise NotFoundError(f"Friendship not found with id: {friendship_id}")

    def _respond(
        self, friendship_id: str, acting_user_id: int, target: FriendshipStatusEnum
    ) -> Friendship:
        verb = "accept" if target == FriendshipStatusEnum.ACCEPTED else "decline"
        with self.store.transaction():
            friendship = self._get_or_raise(friendship_id)
            if friendship.receiver_id != acting_user_id:
                raise ForbiddenError(f"Only the receiver can {verb} the friend request")
            if not friendship.is_pending:
                raise InvalidStateError(
                    f"Friend request is not pending (status: {friendship.status.value})"
                )

            updated = self.store.update_status(friendship_id, FriendshipStatusEnum.PENDING, target)
            if updated is None:
                # Lost a race: report what the winner left behind.
                current = self._get_or_raise(friendship_id)
                raise InvalidStateError(
                    f"Friend request is not pending (status: {current.status.value})"
                )
            return updated

    # --- Queries ---

    def get_pending_requests(self, user_id: int) -> List[Friendship]:
        """Requests received by user_id that are still waiting for an answer."""
        logger.debug(f"Fetching pending requests for user {user_id}")
        return self.store.find_by_receiver_and_status(user_id, FriendshipStatusEnum.PENDING)

    def get_all_friendships(self, user_id: int) -> List[Friendship]:
        logger.debug(f"Fetching all friendships for user {user_id}")
        return self.store.find_by_either_participant(user_id)

    def get_accepted_friends(self, user_id: int) -> List[Friendship]:
        logger.debug(f"Fetching accepted friends for user {user_id}")
        return [f for f in self.store.find_by_either_participant(user_id) if f.is_accepted]

    def get_friend_ids(self, user_id: int) -> List[int]:
        return [f.other_user(user_id) for f in self.get_accepted_friends(user_id)]

    def get_friendship_by_id(self, friendship_id: str) -> Optional[Friendship]:
        return self.store.get_by_id(friendship_id)

    def are_friends(self, user_a: int, user_b: int) -> bool:
        friendship = self._find_existing_friendship(user_a, user_b)
        return friendship is not None and friendship.is_accepted

    def has_pending_request(self, requester_id: int, receiver_id: int) -> bool:
        """Directional: only requester_id -> receiver_id counts."""
        return self.store.find_by_direction_and_status(
            requester_id, receiver_id, FriendshipStatusEnum.PENDING
        ) is not None

    # --- Helpers ---

    def _get_or_raise(self, friendship_id: str) -> Friendship:
        friendship = self.store.get_by_id(friendship_id)
        if friendship is None:
            raise NotFoundError(f"Friendship not found with id: {friendship_id}")
        return friendship

    def _find_existing_friendship(self, user_a: int, user_b: int) -> Optional[Friendship]:
        """Any record for the unordered pair {user_a, user_b}, in either direction."""
        if user_a == user_b:
            return None
        return self.store.find_by_pair(user_a, user_b)
