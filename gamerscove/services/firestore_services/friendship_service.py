import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional
from firebase_admin import firestore
from google.api_core import exceptions as google_api_exceptions

from gamerscove.core.exceptions import ConflictError, InvalidArgumentError
from gamerscove.schemas import Friendship, FriendshipCreate, FriendshipStatusEnum, canonical_pair
from gamerscove.services.relationship_store import RelationshipStore

# Firestore counterpart of crud/crud_friendship.py.
#
# Layout:
#   friendships/{friendship_id}      the record itself
#   friendship_pairs/{low}_{high}    pair guard; create() fails if the pair already has a record

FRIENDSHIPS_COLLECTION = 'friendships'
PAIRS_COLLECTION = 'friendship_pairs'


def pair_document_id(user_a: int, user_b: int) -> str:
    low, high = canonical_pair(user_a, user_b)
    return f"{low}_{high}"


class FirestoreFriendshipStore(RelationshipStore):

    def __init__(self, client=None):
        # The client is requested lazily so firebase_admin.initialize_app() has run first.
        self.client = client if client is not None else firestore.client()

    def get_friendships_collection(self):
        return self.client.collection(FRIENDSHIPS_COLLECTION)

    def get_pairs_collection(self):
        return self.client.collection(PAIRS_COLLECTION)

    @contextmanager
    def transaction(self):
        # Every write below is self-guarded (create() or a write precondition),
        # so there is no client-side transaction to open or roll back.
        yield self

    def _format_friendship_document(self, doc) -> Optional[Friendship]:
        if not doc.exists:
            return None
        data = doc.to_dict()
        if not data:
            return None
        return Friendship(**data)

    def insert(self, friendship_in: FriendshipCreate) -> Friendship:
        if friendship_in.requester_id == friendship_in.receiver_id:
            raise InvalidArgumentError("Cannot send friend request to yourself")

        friendship_id = str(uuid.uuid4())
        pair_id = pair_document_id(friendship_in.requester_id, friendship_in.receiver_id)
        friendship_data = {
            "id": friendship_id,
            "requester_id": friendship_in.requester_id,
            "receiver_id": friendship_in.receiver_id,
            "pair_key": pair_id,
            "status": friendship_in.status.value,
            "created_at": datetime.now(timezone.utc),
        }

        batch = self.client.batch()
        batch.create(self.get_pairs_collection().document(pair_id), {"friendship_id": friendship_id})
        batch.create(self.get_friendships_collection().document(friendship_id), friendship_data)
        try:
            batch.commit()
        except google_api_exceptions.AlreadyExists as e:
            raise ConflictError(f"Friendship already exists for pair {pair_id}") from e
        return Friendship(**friendship_data)

    def get_by_id(self, friendship_id: str) -> Optional[Friendship]:
        doc = self.get_friendships_collection().document(friendship_id).get()
        return self._format_friendship_document(doc)

    def find_by_either_participant(self, user_id: int) -> List[Friendship]:
        friendships_collection = self.get_friendships_collection()
        docs_by_id = {}

        # Firestore has no OR across fields here; run both sides and merge.
        for field in ('requester_id', 'receiver_id'):
            for doc in friendships_collection.where(field, '==', user_id).stream():
                docs_by_id[doc.id] = doc

        friendships = [self._format_friendship_document(doc) for doc in docs_by_id.values()]
        return sorted((f for f in friendships if f), key=lambda f: (f.created_at, f.id))

    def find_by_receiver_and_status(self, receiver_id: int, status: FriendshipStatusEnum) -> List[Friendship]:
        query = self.get_friendships_collection().where('receiver_id', '==', receiver_id) \
                                                 .where('status', '==', status.value)
        friendships = [self._format_friendship_document(doc) for doc in query.stream()]
        return sorted((f for f in friendships if f), key=lambda f: (f.created_at, f.id))

    def find_by_direction_and_status(
        self, requester_id: int, receiver_id: int, status: FriendshipStatusEnum
    ) -> Optional[Friendship]:
        query = self.get_friendships_collection().where('requester_id', '==', requester_id) \
                                                 .where('receiver_id', '==', receiver_id) \
                                                 .where('status', '==', status.value)
        docs = list(query.limit(1).stream())
        if docs:
            return self._format_friendship_document(docs[0])
        return None

    def find_by_pair(self, user_a: int, user_b: int) -> Optional[Friendship]:
        if user_a == user_b:
            return None
        pair_doc = self.get_pairs_collection().document(pair_document_id(user_a, user_b)).get()
        if not pair_doc.exists:
            return None
        return self.get_by_id(pair_doc.to_dict()["friendship_id"])

    def update_status(
        self, friendship_id: str, expected: FriendshipStatusEnum, new: FriendshipStatusEnum
    ) -> Optional[Friendship]:
        doc_ref = self.get_friendships_collection().document(friendship_id)
        doc = doc_ref.get()
        if not doc.exists or doc.to_dict().get("status") != expected.value:
            return None

        try:
            # Fails if anyone wrote or deleted the document after our read.
            doc_ref.update(
                {"status": new.value},
                option=self.client.write_option(last_update_time=doc.update_time),
            )
        except (google_api_exceptions.FailedPrecondition, google_api_exceptions.NotFound):
            return None
        return self.get_by_id(friendship_id)

    def delete(self, friendship_id: str) -> bool:
        doc_ref = self.get_friendships_collection().document(friendship_id)
        doc = doc_ref.get()
        if not doc.exists:
            return False

        pair_id = doc.to_dict()["pair_key"]
        batch = self.client.batch()
        batch.delete(doc_ref, option=self.client.write_option(exists=True))
        batch.delete(self.get_pairs_collection().document(pair_id))
        try:
            batch.commit()
        except (google_api_exceptions.NotFound, google_api_exceptions.FailedPrecondition):
            return False
        return True
