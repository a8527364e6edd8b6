"""
Seed the default rank ladders and task catalog.

- SAFE to run multiple times (existing rank systems / task keys are skipped)
- Does not touch journeys, entries or tasks
- Run after `alembic upgrade head`
"""
import sys
import os

# Add the parent directory to the path so we can import streakkeeper modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from streakkeeper.db.session import SessionLocal
from streakkeeper.ranks.catalog import seed_rank_systems
from streakkeeper.tasks.catalog import seed_task_definitions


def seed_catalog() -> bool:
    db = SessionLocal()

    try:
        ranks = seed_rank_systems(db)
        tasks = seed_task_definitions(db)

        print("Catalog seeding complete")
        print(f"   Rank systems created: {ranks}")
        print(f"   Task definitions created: {tasks}")
        return True

    except Exception as e:
        db.rollback()
        print("Error while seeding the catalog")
        print(str(e))
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if not seed_catalog():
        sys.exit(1)
