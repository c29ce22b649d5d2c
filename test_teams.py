import pytest
from fastapi import HTTPException

from hacksite.config import settings
from hacksite.services import ideas, teams


async def _voted_idea(db, author, title, votes=1):
    idea = await ideas.submit_idea(db, title, f"{title} description", author.id)
    if votes:
        await ideas.set_user_vote_count(db, idea.id, author.id, votes)
    return idea


async def test_create_team_enrols_leader(db, make_user):
    alice = await make_user("alice")
    idea = await _voted_idea(db, alice, "Guide")

    team = await teams.create_team(db, "Mavericks", "We build guides", alice.id, idea.id)

    assert team.idea_id == idea.id
    assert team.leader_id == alice.id
    assert team.max_members == settings.TEAM_MAX_MEMBERS
    assert await teams.is_member(db, team.id, alice.id)
    assert await teams.member_count(db, team.id) == 1


async def test_one_team_per_idea(db, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    idea = await _voted_idea(db, alice, "Guide")
    await teams.create_team(db, "First", "", alice.id, idea.id)

    with pytest.raises(HTTPException) as exc:
        await teams.create_team(db, "Second", "", bob.id, idea.id)
    assert exc.value.status_code == 409
    assert exc.value.detail == teams.TEAM_EXISTS


async def test_only_top_ideas_can_form_teams(db, make_user):
    alice = await make_user("alice")
    for i in range(settings.TEAM_ELIGIBLE_IDEAS):
        await _voted_idea(db, alice, f"Popular {i}", votes=2)
    outsider = await _voted_idea(db, alice, "Outsider", votes=0)

    with pytest.raises(HTTPException) as exc:
        await teams.create_team(db, "Late", "", alice.id, outsider.id)
    assert exc.value.status_code == 400


async def test_blank_team_name_rejected(db, make_user):
    alice = await make_user("alice")
    idea = await _voted_idea(db, alice, "Guide")
    with pytest.raises(HTTPException) as exc:
        await teams.create_team(db, "  ", "", alice.id, idea.id)
    assert exc.value.status_code == 400


async def test_join_is_idempotent_and_capped(db, make_user):
    leader = await make_user("leader")
    idea = await _voted_idea(db, leader, "Guide")
    team = await teams.create_team(db, "Crew", "", leader.id, idea.id)

    first = await make_user("member-0")
    assert await teams.join_team(db, team.id, first.id) is True
    assert await teams.join_team(db, team.id, first.id) is False

    for i in range(1, settings.TEAM_MAX_MEMBERS - 1):
        member = await make_user(f"member-{i}")
        assert await teams.join_team(db, team.id, member.id) is True
    assert await teams.member_count(db, team.id) == settings.TEAM_MAX_MEMBERS

    late = await make_user("late")
    with pytest.raises(HTTPException) as exc:
        await teams.join_team(db, team.id, late.id)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Team is full"


async def test_leave_team(db, make_user):
    leader = await make_user("leader")
    bob = await make_user("bob")
    idea = await _voted_idea(db, leader, "Guide")
    team = await teams.create_team(db, "Crew", "", leader.id, idea.id)
    await teams.join_team(db, team.id, bob.id)

    await teams.leave_team(db, team.id, bob.id)
    assert not await teams.is_member(db, team.id, bob.id)

    with pytest.raises(HTTPException) as exc:
        await teams.leave_team(db, team.id, leader.id)
    assert exc.value.status_code == 400


async def test_list_teams_includes_members_and_idea(db, make_user):
    leader = await make_user("leader")
    bob = await make_user("bob")
    idea = await _voted_idea(db, leader, "Guide")
    team = await teams.create_team(db, "Crew", "", leader.id, idea.id)
    await teams.join_team(db, team.id, bob.id)

    [(listed, members, bound_idea)] = await teams.list_teams(db)

    assert listed.id == team.id
    assert {m.user_id for m in members} == {leader.id, bob.id}
    assert bound_idea.id == idea.id
    assert await teams.user_team_ids(db, bob.id) == [team.id]
