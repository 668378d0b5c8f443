from fastapi import Depends
from sqlalchemy.orm import Session

from gamerscove.core.config import settings
from gamerscove.crud.crud_friendship import CRUDFriendship
from gamerscove.db.session import get_db
from gamerscove.schemas.enums import StoreBackendEnum
from gamerscove.services.firestore_services.friendship_service import FirestoreFriendshipStore
from gamerscove.services.friendship_manager import FriendshipManager
from gamerscove.services.relationship_store import RelationshipStore


def get_relationship_store(db: Session = Depends(get_db)) -> RelationshipStore:
    """Request-scoped Relationship Store for the configured backend."""
    if settings.STORE_BACKEND == StoreBackendEnum.FIRESTORE:
        return FirestoreFriendshipStore()
    return CRUDFriendship(db)


def get_friendship_manager(store: RelationshipStore = Depends(get_relationship_store)) -> FriendshipManager:
    return FriendshipManager(store)
