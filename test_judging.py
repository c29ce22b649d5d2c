import asyncio

import pytest
from fastapi import HTTPException

from hacksite.database import async_session
from hacksite.models.judge_vote import RANK_POINTS
from hacksite.services import judging, projects

JUDGE = "ryan-tan"
OTHER_JUDGE = "thomas-letan"


async def _projects(make_user, make_project, n=3):
    made = []
    for i in range(n):
        leader = await make_user(f"leader-{i}")
        made.append(await make_project(leader, f"Project {i}"))
    return made


async def _points(db, project_id):
    return (await projects.get_project(db, project_id)).judge_vote_count


async def test_assign_rank(db, make_user, make_project):
    a, b, _ = await _projects(make_user, make_project)

    votes = await judging.vote_rank(db, a.id, JUDGE, 1)

    assert votes == {a.id: 1}
    assert await _points(db, a.id) == 3
    assert await _points(db, b.id) == 0


async def test_rank_moves_between_projects(db, make_user, make_project):
    a, b, _ = await _projects(make_user, make_project)
    await judging.vote_rank(db, a.id, JUDGE, 1)

    votes = await judging.vote_rank(db, b.id, JUDGE, 1)

    assert votes == {b.id: 1}
    assert await _points(db, a.id) == 0
    assert await _points(db, b.id) == 3


async def test_project_holds_one_rank_per_judge(db, make_user, make_project):
    a, b, _ = await _projects(make_user, make_project)
    await judging.vote_rank(db, a.id, JUDGE, 1)
    await judging.vote_rank(db, b.id, JUDGE, 2)

    votes = await judging.vote_rank(db, a.id, JUDGE, 2)

    assert votes == {a.id: 2}
    assert await _points(db, a.id) == 2
    assert await _points(db, b.id) == 0


async def test_clear_rank(db, make_user, make_project):
    a, _, _ = await _projects(make_user, make_project)
    await judging.vote_rank(db, a.id, JUDGE, 3)

    assert await judging.unvote_rank(db, a.id, JUDGE) == {}
    assert await _points(db, a.id) == 0


async def test_points_sum_across_judges(db, make_user, make_project):
    a, b, c = await _projects(make_user, make_project)
    await judging.vote_rank(db, a.id, JUDGE, 1)
    await judging.vote_rank(db, b.id, JUDGE, 2)
    await judging.vote_rank(db, c.id, JUDGE, 3)
    await judging.vote_rank(db, a.id, OTHER_JUDGE, 2)

    assert await _points(db, a.id) == 5
    assert await _points(db, b.id) == 2
    assert await _points(db, c.id) == 1
    assert await judging.judge_votes(db, JUDGE) == {a.id: 1, b.id: 2, c.id: 3}

    ordered = await judging.projects_for_judging(db)
    assert [p.id for p in ordered] == [a.id, b.id, c.id]


async def test_invalid_rank_rejected(db, make_user, make_project):
    a, _, _ = await _projects(make_user, make_project)
    with pytest.raises(HTTPException) as exc:
        await judging.vote_rank(db, a.id, JUDGE, 4)
    assert exc.value.status_code == 400


async def test_overlapping_rank_requests_settle_on_one_pick(db, make_user, make_project):
    a, _, _ = await _projects(make_user, make_project)

    async with async_session() as first, async_session() as second:
        results = await asyncio.gather(
            judging.vote_rank(first, a.id, JUDGE, 1),
            judging.vote_rank(second, a.id, JUDGE, 2),
        )

    assert all(isinstance(r, dict) for r in results)
    final = await judging.judge_votes(db, JUDGE)
    assert list(final) == [a.id]
    await db.refresh(a)
    assert a.judge_vote_count == RANK_POINTS[final[a.id]]
