# gamerscove/db/models/friendship.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Integer, String, Enum as SAEnum, UniqueConstraint, CheckConstraint, Index
from gamerscove.db.session import Base
from gamerscove.schemas.enums import FriendshipStatusEnum


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Friendship(Base):
    __tablename__ = "friendships"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    requester_id = Column(Integer, nullable=False, index=True)
    receiver_id = Column(Integer, nullable=False, index=True)

    # Normalized unordered pair (low < high); backs the one-record-per-pair rule.
    pair_low_id = Column(Integer, nullable=False)
    pair_high_id = Column(Integer, nullable=False)

    status = Column(
        SAEnum(FriendshipStatusEnum, name="friendshipstatusenum_sqlalchemy"),
        default=FriendshipStatusEnum.PENDING,
        nullable=False,
    )

    # Python-side default keeps microsecond precision for a stable listing order.
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('pair_low_id', 'pair_high_id', name='uq_friendship_pair'),
        CheckConstraint('requester_id <> receiver_id', name='ck_friendship_not_self'),
        CheckConstraint('pair_low_id < pair_high_id', name='ck_friendship_pair_order'),
        Index('ix_friendships_receiver_status', 'receiver_id', 'status'),
    )

    def __repr__(self) -> str:
        return (
            f"Friendship(id={self.id!r}, requester_id={self.requester_id}, "
            f"receiver_id={self.receiver_id}, status={self.status})"
        )
