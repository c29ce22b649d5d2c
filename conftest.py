import os
import tempfile

# Point the app at a throwaway database before hacksite reads its settings.
_db_dir = tempfile.mkdtemp(prefix="hacksite-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ.setdefault("ADMIN_PASSWORD", "")

import httpx  # noqa: E402
import pytest  # noqa: E402

from hacksite import models  # noqa: E402,F401
from hacksite.database import Base, async_session, engine  # noqa: E402
from hacksite.services import identity  # noqa: E402
from hacksite.services.change_feed import ChangeFeed  # noqa: E402


@pytest.fixture
async def db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with async_session() as session:
        yield session
    await engine.dispose()


@pytest.fixture
async def client(db):
    from hacksite.main import app

    app.state.phase_cache.invalidate()
    app.state.change_feed = ChangeFeed()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(db):
    async def _make(name: str):
        return await identity.login(db, name)

    return _make


async def login_as(client: httpx.AsyncClient, name: str) -> dict:
    resp = await client.post("/auth/login", data={"name": name})
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def make_project(db):
    from hacksite.services import ideas, projects, teams

    async def _make(leader, title="Campus guide"):
        idea = await ideas.submit_idea(db, f"{title} idea", "An idea worth building.", leader.id)
        team = await teams.create_team(db, f"{title} team", "", leader.id, idea.id)
        return await projects.submit_project(
            db,
            team_id=team.id,
            title=title,
            description="What we built.",
            repo_url=" https://example.com/repo ",
            submitter_id=leader.id,
        )

    return _make
