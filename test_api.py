import pytest

from conftest import login_as
from hacksite.config import settings
from hacksite.main import app
from hacksite.models.admin_phase import PhaseName
from hacksite.services.phases import PHASE_SCHEDULE


@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "let-me-in")
    return "let-me-in"


async def _admin(client, password):
    resp = await client.post("/admin/login", data={"password": password})
    assert resp.status_code == 200, resp.text


async def _idea(client, title="Campus guide"):
    resp = await client.post("/ideas", data={"title": title, "description": "Maps for everyone."})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_homepage_stats(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["stats"] == {"users": 0, "ideas": 0, "teams": 0, "projects": 0}


async def test_login_sets_cookie_and_me(client):
    user = await login_as(client, "alice")

    resp = await client.get("/users/me")
    assert resp.status_code == 200
    assert resp.json()["id"] == user["id"]
    assert resp.json()["name"] == "alice"


async def test_login_rejects_blank_name(client):
    resp = await client.post("/auth/login", data={"name": "   "})
    assert resp.status_code == 400


async def test_idea_submission_requires_login(client):
    resp = await client.post("/ideas", data={"title": "x", "description": "y"})
    assert resp.status_code == 401


async def test_idea_voting_flow(client):
    await login_as(client, "alice")
    idea = await _idea(client)

    resp = await client.post(f"/ideas/{idea['id']}/votes", data={"count": 4})
    assert resp.status_code == 200
    assert resp.json() == {"idea_id": idea["id"], "currentCount": 4, "vote_count": 4}

    resp = await client.post(f"/ideas/{idea['id']}/vote")
    assert resp.json()["currentCount"] == 5
    resp = await client.post(f"/ideas/{idea['id']}/vote")
    assert resp.status_code == 400

    resp = await client.get("/ideas/votes/mine")
    assert resp.json() == {str(idea["id"]): 5}

    resp = await client.post(f"/ideas/{idea['id']}/unvote")
    assert resp.json()["vote_count"] == 0


async def test_closed_phase_blocks_idea_submission(client, monkeypatch):
    monkeypatch.setitem(PHASE_SCHEDULE, PhaseName.IDEAS_OPEN, None)
    await login_as(client, "alice")

    resp = await client.post("/ideas", data={"title": "x", "description": "y"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Idea submissions are not open"


async def test_team_and_project_flow(client):
    await login_as(client, "alice")
    idea = await _idea(client)

    resp = await client.post("/teams", data={"name": "Mavericks", "idea_id": idea["id"]})
    assert resp.status_code == 201, resp.text
    team = resp.json()
    assert [m["user_id"] for m in team["members"]] == [team["leader_id"]]
    assert team["idea"]["title"] == "Campus guide"

    resp = await client.post("/teams", data={"name": "Copycats", "idea_id": idea["id"]})
    assert resp.status_code == 409

    resp = await client.post(
        "/projects",
        data={"team_id": team["id"], "title": "Guide", "description": "It works."},
    )
    assert resp.status_code == 201, resp.text

    resp = await client.get("/projects")
    assert [p["team_name"] for p in resp.json()] == ["Mavericks"]


async def test_showcase_voting_gated_until_admin_opens_it(client, make_user, make_project, admin_password):
    leader = await make_user("leader")
    project = await make_project(leader)
    await login_as(client, "voter")

    resp = await client.post(f"/projects/{project.id}/toggle-vote")
    assert resp.status_code == 403

    await _admin(client, admin_password)
    resp = await client.post("/admin/phases/showcase_voting", data={"is_open": "true"})
    assert resp.status_code == 200

    resp = await client.post(f"/projects/{project.id}/toggle-vote")
    assert resp.status_code == 200
    assert resp.json() == {"project_id": project.id, "voted": True, "showcase_vote_count": 1}

    resp = await client.get("/phases")
    assert resp.json()["showcase_voting"] is True


async def test_admin_login_without_password_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")
    resp = await client.post("/admin/login", data={"password": "anything"})
    assert resp.status_code == 503


async def test_admin_routes_need_login(client, admin_password):
    resp = await client.get("/admin/feedback")
    assert resp.status_code == 401

    resp = await client.post("/admin/login", data={"password": "wrong"})
    assert resp.status_code == 401


async def test_admin_reveals_winners(client, make_user, make_project, admin_password):
    leader = await make_user("leader")
    project = await make_project(leader)
    await _admin(client, admin_password)

    resp = await client.post(f"/admin/projects/{project.id}/score", data={"score": "88.5"})
    assert resp.json()["judges_score"] == 88.5

    resp = await client.post("/admin/reveal-winners")
    assert resp.status_code == 200
    categories = [a["category"] for a in resp.json()["awards"]]
    assert categories == ["First Place", "Hacker's Choice"]

    resp = await client.get("/phases")
    assert resp.json()["winners_revealed"] is True


async def test_judge_sign_in_and_rank(client, make_user, make_project):
    leader = await make_user("leader")
    project = await make_project(leader)

    resp = await client.post("/judges/login", data={"judge_name": "Someone Else"})
    assert resp.status_code == 403

    resp = await client.post("/judges/login", data={"judge_name": " Ryan-Tan "})
    assert resp.json()["judge_name"] == "ryan-tan"

    resp = await client.post("/judges/rank", data={"project_id": project.id, "rank": 1})
    assert resp.json() == {str(project.id): 1}

    resp = await client.get("/judges/projects")
    assert resp.json()[0]["judge_vote_count"] == 3


async def test_feedback_severity_parsing(client):
    await login_as(client, "alice")

    resp = await client.post(
        "/feedback", data={"category": "bugs", "description": "Button broken", "severity": ""}
    )
    assert resp.status_code == 201
    assert resp.json()["severity"] is None

    resp = await client.post(
        "/feedback", data={"category": "dx", "description": "Slow", "severity": "extreme"}
    )
    assert resp.status_code == 422


class StubContent:
    def __init__(self, event):
        self.event = event

    def current(self):
        return self.event

    def by_slug(self, slug):
        if self.event and self.event.get("slug") == slug:
            return self.event
        return None


async def test_event_endpoints(client, monkeypatch):
    event = {
        "title": "Hack the Nest",
        "tagline": "Build",
        "description": [{"children": [{"text": "Hello"}]}],
        "prizes": [{"position": "1st", "amount": 500}],
        "schedule_items": [
            {"date": "2025-12-01", "time": "09:00", "title": "Doors"},
            {"date": "2025-12-02", "time": "17:00", "title": "Demos"},
        ],
    }
    monkeypatch.setattr(app.state, "event_content", StubContent(event))

    resp = await client.get("/event")
    assert resp.json()["description"] == "Hello"
    assert resp.json()["prizes"] == [{"position": "1st", "amount": 500}]

    resp = await client.get("/event/schedule")
    assert [d["date"] for d in resp.json()["days"]] == ["2025-12-01", "2025-12-02"]


async def test_event_missing(client, monkeypatch):
    monkeypatch.setattr(app.state, "event_content", StubContent(None))
    resp = await client.get("/event")
    assert resp.status_code == 404


async def test_event_by_slug(client, monkeypatch):
    event = {"title": "Winter Hack", "slug": "winter-hack", "description": "Cold code", "prizes": []}
    monkeypatch.setattr(app.state, "event_content", StubContent(event))

    resp = await client.get("/event/winter-hack")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Winter Hack"
    assert resp.json()["description"] == "Cold code"

    resp = await client.get("/event/summer-hack")
    assert resp.status_code == 404
