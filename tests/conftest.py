from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from news_backend.exceptions import InvalidTokenError
from news_backend.services.news_source import RemoteArticle


VALID_TOKEN = "valid-token"


class StubTokenVerifier:
    def __init__(self):
        self.calls = []

    async def verify(self, token):
        self.calls.append(token)
        if token != VALID_TOKEN:
            raise InvalidTokenError("Invalid token")
        return {"uid": "test-uid", "email": "editor@example.org"}


@pytest.fixture
def make_remote_article():
    def _make(title, published_at, **overrides):
        data = {
            "title": title,
            "description": f"{title} description",
            "url": f"https://news.example.com/{title.lower().replace(' ', '-')}",
            "urlToImage": f"https://img.example.com/{title.lower().replace(' ', '-')}.jpg",
            "publishedAt": published_at,
        }
        data.update(overrides)
        return RemoteArticle.model_validate(data)

    return _make


@pytest.fixture
def session_factory():
    from news_backend.core.database import Base
    from news_backend.models import NewsArticle  # noqa: F401

    # StaticPool keeps a single in-memory database shared across threads
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def test_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def seed_articles(test_db):
    from news_backend.models import NewsArticle

    def _seed(*titles_and_dates):
        for title, published_at in titles_and_dates:
            test_db.add(NewsArticle(title=title, published_at=published_at))
        test_db.commit()

    return _seed


@pytest.fixture
def mock_news_client():
    client = MagicMock()
    client.fetch_articles = AsyncMock(return_value=[])
    return client


@pytest.fixture
def sync_service(mock_news_client, session_factory):
    from news_backend.services.news_sync_service import NewsSyncService
    return NewsSyncService(mock_news_client, session_factory)


@pytest.fixture
def token_verifier():
    return StubTokenVerifier()


@pytest.fixture
def mock_mail_relay():
    relay = MagicMock()
    relay.send = AsyncMock(return_value=None)
    return relay


@pytest.fixture
def test_settings():
    from news_backend.config import Settings
    return Settings(email_user="volunteers@example.org", email_pass="app-password", sync_schedule_enabled=False)


@pytest.fixture
async def async_client(session_factory, sync_service, token_verifier, mock_mail_relay, test_settings):
    from httpx import AsyncClient, ASGITransport
    from news_backend.main import app
    from news_backend.config import get_settings
    from news_backend.core.database import get_db
    from news_backend.api.dependencies import get_mail_relay, get_sync_service, get_token_verifier

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sync_service] = lambda: sync_service
    app.dependency_overrides[get_token_verifier] = lambda: token_verifier
    app.dependency_overrides[get_mail_relay] = lambda: mock_mail_relay
    app.dependency_overrides[get_settings] = lambda: test_settings

    # ASGITransport does not run the lifespan, so no scheduler or real collaborators start
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()

