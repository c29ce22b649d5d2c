import pytest
from fastapi import HTTPException

from hacksite.services import ideas, projects, teams


async def test_submit_project_cleans_fields(db, make_user, make_project):
    alice = await make_user("alice")
    project = await make_project(alice)

    assert project.repo_url == "https://example.com/repo"
    assert project.demo_url is None
    assert project.showcase_vote_count == 0


async def test_only_team_members_submit(db, make_user, make_project):
    alice = await make_user("alice")
    mallory = await make_user("mallory")
    idea = await ideas.submit_idea(db, "Guide", "desc", alice.id)
    team = await teams.create_team(db, "Crew", "", alice.id, idea.id)

    with pytest.raises(HTTPException) as exc:
        await projects.submit_project(db, team.id, "Hijack", "desc", submitter_id=mallory.id)
    assert exc.value.status_code == 403


async def test_showcase_vote_is_single(db, make_user, make_project):
    alice = await make_user("alice")
    bob = await make_user("bob")
    project = await make_project(alice)

    await projects.vote_showcase(db, project.id, bob.id)
    await projects.vote_showcase(db, project.id, bob.id)

    refreshed = await projects.get_project(db, project.id)
    assert refreshed.showcase_vote_count == 1
    assert await projects.user_showcase_votes(db, bob.id) == {project.id}


async def test_toggle_flips_vote(db, make_user, make_project):
    alice = await make_user("alice")
    bob = await make_user("bob")
    project = await make_project(alice)

    assert await projects.toggle_showcase_vote(db, project.id, bob.id) is True
    assert await projects.has_voted(db, project.id, bob.id)
    assert await projects.toggle_showcase_vote(db, project.id, bob.id) is False
    assert not await projects.has_voted(db, project.id, bob.id)

    refreshed = await projects.get_project(db, project.id)
    assert refreshed.showcase_vote_count == 0


async def test_list_projects_sorted_by_votes(db, make_user, make_project):
    alice = await make_user("alice")
    bob = await make_user("bob")
    quiet = await make_project(alice, "Quiet")
    loud = await make_project(bob, "Loud")
    await projects.vote_showcase(db, loud.id, alice.id)

    listed = await projects.list_projects(db)

    assert [p["id"] for p in listed] == [loud.id, quiet.id]
    assert listed[0]["team_name"] == "Loud team"
    assert listed[0]["showcase_vote_count"] == 1
