from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone

from gamerscove.core.exceptions import InvalidArgumentError
from .enums import FriendshipStatusEnum

# Wire format is camelCase (requesterId, receiverId, createdAt); Python code uses snake_case.
camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def canonical_pair(user_a: int, user_b: int) -> tuple[int, int]:
    """Normalizes an unordered pair so {a, b} and {b, a} share one key."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


# --- Friendship Schemas ---

class FriendRequestIn(BaseModel):
    """Body of POST /request."""
    requester_id: int
    receiver_id: int

    model_config = camel_config


class FriendshipCreate(BaseModel):
    """What the manager hands a Relationship Store to insert."""
    requester_id: int
    receiver_id: int
    status: FriendshipStatusEnum = FriendshipStatusEnum.PENDING

    @property
    def pair_key(self) -> tuple[int, int]:
        return canonical_pair(self.requester_id, self.receiver_id)


class Friendship(BaseModel):
    id: str
    requester_id: int
    receiver_id: int
    status: FriendshipStatusEnum
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back naive; everything is stored in UTC.
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    @property
    def is_pending(self) -> bool:
        return self.status == FriendshipStatusEnum.PENDING

    @property
    def is_accepted(self) -> bool:
        return self.status == FriendshipStatusEnum.ACCEPTED

    @property
    def is_declined(self) -> bool:
        return self.status == FriendshipStatusEnum.DECLINED

    def involves_user(self, user_id: int) -> bool:
        return user_id == self.requester_id or user_id == self.receiver_id

    def other_user(self, user_id: int) -> int:
        """Returns the participant that is not `user_id`."""
        if user_id == self.requester_id:
            return self.receiver_id
        if user_id == self.receiver_id:
            return self.requester_id
        raise InvalidArgumentError(f"User {user_id} is not part of friendship {self.id}")


class AreFriendsResponse(BaseModel):
    are_friends: bool

    model_config = camel_config


class PendingRequestCheckResponse(BaseModel):
    has_pending_request: bool

    model_config = camel_config
