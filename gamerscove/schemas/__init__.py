from .enums import FriendshipStatusEnum, StoreBackendEnum
from .friendship import (
    canonical_pair,
    FriendRequestIn,
    FriendshipCreate,
    Friendship,
    AreFriendsResponse,
    PendingRequestCheckResponse,
)
