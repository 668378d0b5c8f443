# gamerscove/crud/crud_friendship.py
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gamerscove.core.exceptions import ConflictError, InvalidArgumentError
from gamerscove.db import models
from gamerscove.schemas import Friendship, FriendshipCreate, FriendshipStatusEnum, canonical_pair
from gamerscove.services.relationship_store import RelationshipStore


class CRUDFriendship(RelationshipStore):
    """SQLAlchemy-backed Relationship Store. One instance per request-scoped Session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _query(self):
        # Always re-read rows: a lost compare-and-set must observe the winner's write,
        # not whatever the identity map cached earlier in the request.
        return self.db.query(models.Friendship).populate_existing()

    def insert(self, friendship_in: FriendshipCreate) -> Friendship:
        if friendship_in.requester_id == friendship_in.receiver_id:
            raise InvalidArgumentError("Cannot send friend request to yourself")

        low, high = friendship_in.pair_key
        db_obj = models.Friendship(
            requester_id=friendship_in.requester_id,
            receiver_id=friendship_in.receiver_id,
            pair_low_id=low,
            pair_high_id=high,
            status=friendship_in.status,
        )
        self.db.add(db_obj)
        try:
            # Flush now so the pair constraint fires inside this unit of work.
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"Friendship already exists between users {low} and {high}"
            ) from e
        return Friendship.model_validate(db_obj)

    def get_by_id(self, friendship_id: str) -> Optional[Friendship]:
        db_obj = self._query().filter(models.Friendship.id == friendship_id).first()
        return Friendship.model_validate(db_obj) if db_obj else None

    def find_by_either_participant(self, user_id: int) -> List[Friendship]:
        rows = (
            self._query()
            .filter(or_(models.Friendship.requester_id == user_id, models.Friendship.receiver_id == user_id))
            .order_by(models.Friendship.created_at, models.Friendship.id)
            .all()
        )
        return [Friendship.model_validate(row) for row in rows]

    def find_by_receiver_and_status(self, receiver_id: int, status: FriendshipStatusEnum) -> List[Friendship]:
        rows = (
            self._query()
            .filter(
                models.Friendship.receiver_id == receiver_id,
                models.Friendship.status == status,
            )
            .order_by(models.Friendship.created_at, models.Friendship.id)
            .all()
        )
        return [Friendship.model_validate(row) for row in rows]

    def find_by_direction_and_status(
        self, requester_id: int, receiver_id: int, status: FriendshipStatusEnum
    ) -> Optional[Friendship]:
        db_obj = self._query().filter(
            models.Friendship.requester_id == requester_id,
            models.Friendship.receiver_id == receiver_id,
            models.Friendship.status == status,
        ).first()
        return Friendship.model_validate(db_obj) if db_obj else None

    def find_by_pair(self, user_a: int, user_b: int) -> Optional[Friendship]:
        if user_a == user_b:
            return None
        low, high = canonical_pair(user_a, user_b)
        db_obj = self._query().filter(
            models.Friendship.pair_low_id == low,
            models.Friendship.pair_high_id == high,
        ).first()
        return Friendship.model_validate(db_obj) if db_obj else None

    def update_status(
        self, friendship_id: str, expected: FriendshipStatusEnum, new: FriendshipStatusEnum
    ) -> Optional[Friendship]:
        updated = (
            self.db.query(models.Friendship)
            .filter(models.Friendship.id == friendship_id, models.Friendship.status == expected)
            .update({models.Friendship.status: new}, synchronize_session=False)
        )
        if not updated:
            return None
        return self.get_by_id(friendship_id)

    def delete(self, friendship_id: str) -> bool:
        deleted = (
            self.db.query(models.Friendship)
            .filter(models.Friendship.id == friendship_id)
            .delete(synchronize_session=False)
        )
        return deleted > 0
