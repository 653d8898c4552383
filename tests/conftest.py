from collections.abc import AsyncGenerator, Callable, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from tether.config import Settings
from tether.main import create_app
from tether.auth.models import User  # noqa: F401 - register with Base
from tether.posts.models import Post  # noqa: F401 - register with Base
from tether.social_graph.models import Bookmark, Follow  # noqa: F401 - register with Base
from tether_shared.database import open_store

TEST_JWT_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tether_test.db'}",
        jwt_secret=TEST_JWT_SECRET,
        log_level="WARNING",
        cors_origins="http://testserver",
    )


@pytest_asyncio.fixture
async def db_session(settings: Settings) -> AsyncGenerator[AsyncSession, None]:
    store = open_store(settings.database_url)
    await store.create_schema()
    async with store.session_factory() as session:
        yield session
    await store.close()


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client: TestClient) -> Callable[..., tuple[dict, str]]:
    """Register a user over HTTP and return (user, token)."""

    def _register(username: str, password: str = "secret1", email: str | None = None) -> tuple[dict, str]:
        resp = client.post(
            "/api/v1/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["user"], data["token"]

    return _register


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    return bearer
