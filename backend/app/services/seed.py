from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.core.config import settings
from app.core.logging import logger
from app.crud.users import find_by_email, create as create_user

def seed_demo():
    db: Session = SessionLocal()
    try:
        if settings.DEMO_USER_EMAIL and settings.DEMO_USER_PASSWORD:
            if not find_by_email(db, settings.DEMO_USER_EMAIL):
                create_user(
                    db,
                    {"email": settings.DEMO_USER_EMAIL, "display_name": "Demo User"},
                    password=settings.DEMO_USER_PASSWORD,
                )
                logger.info("demo_user_seeded", email=settings.DEMO_USER_EMAIL)
    finally:
        db.close()
