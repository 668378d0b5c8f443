import enum

class FriendshipStatusEnum(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

class StoreBackendEnum(str, enum.Enum):
    SQL = "sql"
    FIRESTORE = "firestore"
