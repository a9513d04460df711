import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tafa.database import Base, get_db
from tafa.dependencies import get_insight_gateway
from tafa.main import app
from tafa.models.kv_entry import KVEntry  # noqa: F401
from tafa.providers.base import BaseProvider
from tafa.services.insight_service import InsightGateway
from tafa.services.llm_gateway import LLMGateway
from tafa.services.storage_service import StorageAdapter


class FakeProvider(BaseProvider):
    """Scripted provider: returns `text`, or fails when `error` is set."""

    def __init__(self, text="Model says hi", error=None, raises=False):
        self.text = text
        self.error = error
        self.raises = raises
        self.calls = []

    @property
    def name(self) -> str:
        return "fake"

    async def chat(self, messages, model=None, max_tokens=1024):
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.raises:
            raise RuntimeError("connection reset")
        if self.error:
            return self._failed("fake-model", self.error)
        return self._success("fake-model", self.text)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def storage(db_session):
    return StorageAdapter(db_session)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def client(db_session, fake_provider):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_insight_gateway] = lambda: InsightGateway(LLMGateway(fake_provider))
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
