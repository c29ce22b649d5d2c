import asyncio

from hacksite.database import Base, async_session, engine
from hacksite import models  # noqa: F401
from hacksite.models.admin_phase import PhaseName
from hacksite.services import identity, ideas, teams
from hacksite.services.phases import toggle_phase


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        # Create users
        alice = await identity.login(session, "Alice")
        bob = await identity.login(session, "Bob")
        charlie = await identity.login(session, "Charlie")
        diana = await identity.login(session, "Diana")

        # Ideas
        guide = await ideas.submit_idea(
            session, "AI campus guide", "A chat assistant that knows every building and timetable.", alice.id
        )
        grades = await ideas.submit_idea(
            session, "Grade predictor", "Predict course outcomes from early assignment scores.", charlie.id
        )
        await ideas.submit_idea(
            session, "Green commute", "Carpool matching for students who live nearby.", diana.id
        )

        # Votes
        await ideas.set_user_vote_count(session, guide.id, bob.id, 5)
        await ideas.set_user_vote_count(session, guide.id, diana.id, 2)
        await ideas.set_user_vote_count(session, grades.id, alice.id, 3)

        # Teams on the two leading ideas
        mavericks = await teams.create_team(session, "The Mavericks", "Building an AI campus guide", alice.id, guide.id)
        await teams.join_team(session, mavericks.id, bob.id)
        await teams.create_team(session, "Data Wizards", "Predicting grades with ML", charlie.id, grades.id)

        # Open the early phases
        await toggle_phase(session, PhaseName.IDEAS_OPEN, True)
        await toggle_phase(session, PhaseName.IDEAS_VOTING, True)
        await toggle_phase(session, PhaseName.TEAMS_OPEN, True)

    await engine.dispose()
    print("Database seeded with users, ideas, votes and teams successfully.")


if __name__ == "__main__":
    asyncio.run(async_main())
