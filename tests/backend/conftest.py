import os
import uuid

TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from ywd_admin.core import db as db_module
from ywd_admin.core.bootstrap import seed_reference_data
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.main import app
from ywd_admin.services import create_plan, provision_user


db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


def random_phone() -> str:
    """A unique normalized phone: +7 followed by ten digits."""
    return "+79" + str(uuid.uuid4().int)[:9]


@pytest_asyncio.fixture
async def gateway():
    """
    A connected GraphGateway over a fresh database with reference data seeded.
    """
    await _init_test_db()
    gw = GraphGateway()
    await gw.ensure_connected()
    await seed_reference_data(gw)
    yield gw
    await gw.close()


@pytest_asyncio.fixture
async def client(gateway):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app, sharing the test gateway.
    """
    app.state.gateway = gateway
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(gateway):
    """
    Factory fixture provisioning users of any role through the workflow.
    """

    async def _create_user(role: str = "cadet", password: str = "UserPass!23", **fields):
        user = await provision_user(
            gateway,
            name=fields.get("name", "Пётр"),
            surname=fields.get("surname", f"Петров{uuid.uuid4().hex[:4]}"),
            patronymic=fields.get("patronymic"),
            phone=fields.get("phone", random_phone()),
            password=password,
            role=role,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_admin(create_user):
    """
    Factory fixture to create admin users for privileged endpoints.
    """

    async def _create_admin(password: str = "AdminPass!23"):
        return await create_user(role="admin", password=password, name="Анна", surname="Админова")

    return _create_admin


@pytest_asyncio.fixture
async def make_plan(gateway):
    async def _make_plan(name: str = "Стандарт", practice_hours: int = 56, price: float = 45000):
        return await create_plan(gateway, name=name, practice_hours=practice_hours, price=price)

    return _make_plan


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(phone: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/auth/login",
            json={"phone": phone, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def admin_headers(create_admin, auth_header_factory):
    admin, password = await create_admin()
    return await auth_header_factory(admin.phone, password)
