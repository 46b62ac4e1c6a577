"""Seed the eight core onboarding questions into the core_questions table.

Run from the project root with ``python -m scripts.seed_core_questions``.
Existing rows are updated in place, so the script is safe to re-run after
editing the catalog.
"""
import asyncio

from sqlalchemy import select

from app.database import async_session_factory, engine
from app.models.psyche import CoreQuestion
from app.services.psyche_catalog import CORE_QUESTIONS


async def seed():
    async with async_session_factory() as session:
        for position, q in enumerate(CORE_QUESTIONS, start=1):
            result = await session.execute(
                select(CoreQuestion).where(CoreQuestion.question_key == q["id"])
            )
            row = result.scalar_one_or_none()
            if row is None:
                session.add(
                    CoreQuestion(
                        question_key=q["id"],
                        position=position,
                        question_text=q["question"],
                        options=q["options"],
                    )
                )
                print(f"  Seeded question {position}: {q['id']}")
            else:
                row.position = position
                row.question_text = q["question"]
                row.options = q["options"]
                print(f"  Question {position} already exists, refreshed.")
        await session.commit()
    await engine.dispose()
    print("Done seeding core questions.")


if __name__ == "__main__":
    asyncio.run(seed())
