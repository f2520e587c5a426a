"""
Create the platform tables and seed the achievement catalog and admin user.

Safe to run repeatedly: achievements are matched by name and the admin user
by email, so a second run seeds nothing.
"""
from app.core.config import settings
from app.core.gamification.rules import DEFAULT_ACHIEVEMENTS
from app.db.base import SessionLocal, engine
from app.db.init_db import init_db
from app.models import Base


def init() -> None:
    print(f"Creating tables in {engine.url.render_as_string(hide_password=True)}...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seeded = init_db(db)
    finally:
        db.close()

    print(f"✅ Achievements: {seeded['achievements']} added, {len(DEFAULT_ACHIEVEMENTS)} in catalog")
    if seeded["admin_created"]:
        print(f"✅ Admin user created: {settings.SEED_ADMIN_EMAIL}")
    else:
        print(f"Admin user already present: {settings.SEED_ADMIN_EMAIL}")


if __name__ == "__main__":
    init()
