"""Flow-test fixtures: the seeded acme holding (see tests/integration/seed.py)."""

import pytest

from tests.integration.seed import Seed, seed_acme_holding
from tests.stores import SqliteConnectionRouter


@pytest.fixture
async def seed(connection_router: SqliteConnectionRouter) -> Seed:
    return await seed_acme_holding(connection_router)
