"""
Script to recreate the front desk database and seed demo shifts
"""
from sqlalchemy import create_engine

from frontdesk.core.config import settings
from frontdesk.core.database import SessionLocal
from frontdesk.models import Base
from frontdesk.services.seed import seed_demo


def recreate_db():
    print("Recreating front desk database...")

    engine = create_engine(settings.database_url, pool_pre_ping=True)

    print("Dropping existing tables...")
    Base.metadata.drop_all(bind=engine)

    print("Creating tables...")
    Base.metadata.create_all(bind=engine)

    print("Seeding demo shifts...")
    db = SessionLocal()
    try:
        seed_demo(db)
    except Exception as e:
        print(f"Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

    print("Database recreated successfully!")


if __name__ == "__main__":
    recreate_db()
