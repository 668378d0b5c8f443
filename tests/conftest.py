"""Pytest fixtures for the friendship service tests.

SQL tests run against a file-backed SQLite database created per test, so
separate sessions (and threads) see each other's commits. Firestore tests
run against FakeFirestoreClient, an in-process stand-in implementing the
slice of the google-cloud-firestore client the store uses.
"""

import itertools
import threading

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as google_api_exceptions
from sqlalchemy.orm import sessionmaker

from gamerscove.crud.crud_friendship import CRUDFriendship
from gamerscove.db import models  # noqa: F401  registers tables
from gamerscove.db.session import Base, get_db, make_engine
from gamerscove.main import app
from gamerscove.services.firestore_services.friendship_service import FirestoreFriendshipStore
from gamerscove.services.friendship_manager import FriendshipManager


# --- SQL fixtures ---

@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'friendships.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def manager(db_session):
    return FriendshipManager(CRUDFriendship(db_session))


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the per-test SQLite database.

    The client is not entered as a context manager, so the app lifespan
    (table creation on the default DATABASE_URL) never runs.
    """

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# --- Firestore fake ---

class FakeSnapshot:
    def __init__(self, doc_id, data, update_time):
        self.id = doc_id
        self._data = data
        self.update_time = update_time

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, client, collection, doc_id):
        self._client = client
        self.key = (collection, doc_id)
        self.id = doc_id

    def get(self):
        return self._client._snapshot(self.key)

    def update(self, data, option=None):
        with self._client._lock:
            self._client._check_option(self.key, option)
            if self.key not in self._client._docs:
                raise google_api_exceptions.NotFound(f"No document to update: {self.key}")
            self._client._write(self.key, {**self._client._docs[self.key], **data})


class FakeQuery:
    def __init__(self, client, collection, filters=(), limit=None):
        self._client = client
        self._collection = collection
        self._filters = filters
        self._limit = limit

    def where(self, field, op, value):
        assert op == '==', "only equality filters are faked"
        return FakeQuery(self._client, self._collection, self._filters + ((field, value),), self._limit)

    def limit(self, count):
        return FakeQuery(self._client, self._collection, self._filters, count)

    def stream(self):
        with self._client._lock:
            matches = [
                self._client._snapshot(key)
                for key, data in self._client._docs.items()
                if key[0] == self._collection
                and all(data.get(field) == value for field, value in self._filters)
            ]
        if self._limit is not None:
            matches = matches[:self._limit]
        return iter(matches)


class FakeCollection(FakeQuery):
    def __init__(self, client, collection):
        super().__init__(client, collection)

    def document(self, doc_id):
        return FakeDocumentReference(self._client, self._collection, doc_id)


class FakeWriteBatch:
    def __init__(self, client):
        self._client = client
        self._writes = []

    def create(self, reference, document_data):
        self._writes.append(("create", reference, document_data, None))

    def delete(self, reference, option=None):
        self._writes.append(("delete", reference, None, option))

    def commit(self):
        # All-or-nothing: validate every write before applying any.
        with self._client._lock:
            for kind, reference, _, option in self._writes:
                if kind == "create" and reference.key in self._client._docs:
                    raise google_api_exceptions.AlreadyExists(f"Document already exists: {reference.key}")
                if kind == "delete":
                    self._client._check_option(reference.key, option)
            for kind, reference, data, _ in self._writes:
                if kind == "create":
                    self._client._write(reference.key, dict(data))
                else:
                    self._client._docs.pop(reference.key, None)
                    self._client._update_times.pop(reference.key, None)


class FakeFirestoreClient:
    def __init__(self):
        self._docs = {}
        self._update_times = {}
        self._clock = itertools.count(1)
        self._lock = threading.RLock()

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeWriteBatch(self)

    def write_option(self, **kwargs):
        return kwargs

    def documents(self, collection):
        """Test helper: raw data of every document in a collection."""
        with self._lock:
            return {key[1]: dict(data) for key, data in self._docs.items() if key[0] == collection}

    def _snapshot(self, key):
        with self._lock:
            data = self._docs.get(key)
            return FakeSnapshot(key[1], dict(data) if data is not None else None, self._update_times.get(key))

    def _write(self, key, data):
        self._docs[key] = data
        self._update_times[key] = next(self._clock)

    def _check_option(self, key, option):
        if not option:
            return
        if option.get("exists") and key not in self._docs:
            raise google_api_exceptions.NotFound(f"Document does not exist: {key}")
        if "last_update_time" in option and self._update_times.get(key) != option["last_update_time"]:
            raise google_api_exceptions.FailedPrecondition(f"Document changed since read: {key}")


@pytest.fixture
def firestore_client():
    return FakeFirestoreClient()


@pytest.fixture
def firestore_store(firestore_client):
    return FirestoreFriendshipStore(client=firestore_client)


@pytest.fixture
def firestore_manager(firestore_store):
    return FriendshipManager(firestore_store)
