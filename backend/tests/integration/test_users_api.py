"""HTTP tests for the /users endpoints, backed by an in-memory SQLite database."""

from collections.abc import AsyncIterator, Sequence
from http import HTTPStatus
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from users_api.application.interfaces import UserRepository
from users_api.application.services import UserService
from users_api.domain.entities import User, UserUpdate
from users_api.domain.exceptions import ResourceNotFoundError, StorageError, ValidationError
from users_api.domain.value_objects import UserId
from users_api.infrastructure.database import Base, get_db_session
from users_api.infrastructure.database.session import build_engine
from users_api.infrastructure.dependencies import get_user_service
from users_api.main import app
from users_api.presentation.api.v1.endpoints.users import _to_http_error

USERS_URL = "/api/v1/users"


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _test_session() -> AsyncIterator[AsyncSession]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await engine.dispose()


async def _create(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Jon Jonsson", "email_address": "some@email.com", **overrides}
    response = await client.post(USERS_URL, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_users_can_be_created(client: AsyncClient):
    user = await _create(client)
    assert user["name"] == "Jon Jonsson"
    assert user["email_address"] == "some@email.com"
    assert user["updated_at"] is None
    UserId.parse(user["id"])


@pytest.mark.asyncio
async def test_create_accepts_email_alias(client: AsyncClient):
    response = await client.post(USERS_URL, json={"name": "Jon", "email": "alias@mail.com"})
    assert response.status_code == 201
    assert response.json()["email_address"] == "alias@mail.com"


@pytest.mark.asyncio
async def test_create_rejects_address_without_at_symbol(client: AsyncClient):
    response = await client.post(
        USERS_URL, json={"name": "Jon Jonsson", "email_address": "not an email address"}
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Email address must have the @ symbol"


@pytest.mark.asyncio
async def test_create_rejects_address_with_forbidden_character(client: AsyncClient):
    response = await client.post(
        USERS_URL, json={"name": "Jon Jonsson", "email_address": "invalid_email/@domain.com"}
    )
    assert response.status_code == 422
    assert "should not contain" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_rejects_blank_name(client: AsyncClient):
    response = await client.post(USERS_URL, json={"name": "  ", "email_address": "a@b.c"})
    assert response.status_code == 422
    assert response.json()["detail"] == "User name cannot be empty"


@pytest.mark.asyncio
async def test_users_can_be_fetched(client: AsyncClient):
    created = await _create(client)
    response = await client.get(f"{USERS_URL}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.asyncio
async def test_fetching_unknown_user_returns_404(client: AsyncClient):
    response = await client.get(f"{USERS_URL}/{uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_users_name_can_be_updated(client: AsyncClient):
    created = await _create(client)
    response = await client.patch(
        f"{USERS_URL}/{created['id']}",
        json={"updates": [{"type": "Name", "value": "Totally new name"}]},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Totally new name"
    assert updated["updated_at"] is not None
    assert updated["created_at"] == created["created_at"]


@pytest.mark.asyncio
async def test_users_email_address_can_be_updated(client: AsyncClient):
    created = await _create(client)
    response = await client.patch(
        f"{USERS_URL}/{created['id']}",
        json={"updates": [{"type": "EmailAddress", "value": "brand_new_email@address"}]},
    )
    assert response.status_code == 200
    assert response.json()["email_address"] == "brand_new_email@address"


@pytest.mark.asyncio
async def test_update_with_empty_list_returns_422(client: AsyncClient):
    created = await _create(client)
    response = await client.patch(f"{USERS_URL}/{created['id']}", json={"updates": []})
    assert response.status_code == 422
    assert response.json()["detail"] == "List of updates was empty"


@pytest.mark.asyncio
async def test_update_with_invalid_value_returns_422(client: AsyncClient):
    created = await _create(client)
    response = await client.patch(
        f"{USERS_URL}/{created['id']}",
        json={"updates": [{"type": "EmailAddress", "value": "<script>@x"}]},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_with_unknown_type_returns_422(client: AsyncClient):
    created = await _create(client)
    response = await client.patch(
        f"{USERS_URL}/{created['id']}",
        json={"updates": [{"type": "CreatedAt", "value": "yesterday"}]},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_updating_unknown_user_returns_404(client: AsyncClient):
    response = await client.patch(
        f"{USERS_URL}/{uuid4()}",
        json={"updates": [{"type": "Name", "value": "Nobody"}]},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_users_can_be_deleted(client: AsyncClient):
    created = await _create(client)

    response = await client.delete(f"{USERS_URL}/{created['id']}")
    assert response.status_code == 200

    response = await client.get(f"{USERS_URL}/{created['id']}")
    assert response.status_code == 404

    response = await client.delete(f"{USERS_URL}/{created['id']}")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_malformed_id_returns_422(client: AsyncClient):
    response = await client.get(f"{USERS_URL}/not-a-uuid")
    assert response.status_code == 422


# ── Repository failures ──────────────────────────────────────────────


class FailingUserRepository(UserRepository):
    """Every call fails the way an unreachable database would."""

    async def create(self, user: User) -> User:
        raise StorageError("Fake IO Error")

    async def get_by_id(self, user_id: UserId) -> User:
        raise StorageError("Fake IO Error")

    async def update(self, user_id: UserId, updates: Sequence[UserUpdate]) -> User:
        raise StorageError("Fake IO Error")

    async def delete(self, user_id: UserId) -> None:
        raise StorageError("Fake IO Error")


@pytest.mark.asyncio
async def test_storage_failure_returns_generic_500(caplog):
    app.dependency_overrides[get_user_service] = lambda: UserService(FailingUserRepository())
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.delete(f"{USERS_URL}/{UserId()}")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert "Fake IO Error" in caplog.text


def test_domain_errors_map_to_named_statuses():
    assert _to_http_error(ValidationError("bad")).status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert _to_http_error(ResourceNotFoundError("User")).status_code == HTTPStatus.NOT_FOUND
    assert _to_http_error(StorageError("down")).status_code == HTTPStatus.INTERNAL_SERVER_ERROR
