"""
Database initialization script.

Creates the tables, then seeds the default admin account and the starter
skill catalog. With ``SEED_DEMO_DATA=true`` it also adds a handful of public
demo users with offered and wanted skills.

    python -m skillswap.db.init_db
"""
import logging
from sqlalchemy.orm import Session
from skillswap.core.config import settings
from skillswap.core.security import get_password_hash
from skillswap.db.session import SessionLocal, init_db
from skillswap.models import OfferedSkill, Skill, User, WantedSkill
from skillswap.models.skill import ExperienceLevel, Priority

logger = logging.getLogger(__name__)

DEFAULT_SKILLS = [
    ("JavaScript", "Programming language for web development", "Programming"),
    ("Python", "General-purpose programming language", "Programming"),
    ("Photoshop", "Image editing and graphic design", "Design"),
    ("Excel", "Spreadsheet and data analysis", "Business"),
    ("Cooking", "Culinary arts and meal preparation", "Lifestyle"),
    ("Photography", "Digital and film photography", "Arts"),
    ("Guitar", "Musical instrument instruction", "Music"),
    ("Spanish", "Spanish language instruction", "Language"),
    ("Yoga", "Physical and mental wellness", "Fitness"),
    ("Writing", "Creative and technical writing", "Communication"),
]

# name, email, location, offered skills, wanted skills
DEMO_USERS = [
    ("John Developer", "john@example.com", "San Francisco, CA", ["JavaScript", "Python"], ["Cooking", "Photography"]),
    ("Sarah Designer", "sarah@example.com", "New York, NY", ["Photoshop"], ["JavaScript", "Writing"]),
    ("Mike Chef", "mike@example.com", "Los Angeles, CA", ["Cooking"], ["Photography", "Guitar"]),
    ("Emma Photographer", "emma@example.com", "Chicago, IL", ["Photography"], ["Cooking", "Spanish"]),
    ("David Musician", "david@example.com", "Austin, TX", ["Guitar"], ["Photography", "Writing"]),
    ("Lisa Writer", "lisa@example.com", "Seattle, WA", ["Writing"], ["JavaScript", "Yoga"]),
    ("Alex Fitness", "alex@example.com", "Miami, FL", ["Yoga"], ["Cooking", "Spanish"]),
    ("Maria Language", "maria@example.com", "Denver, CO", ["Spanish"], ["Guitar", "Photography"]),
]

DEMO_PASSWORD = "password123"


def seed_admin(db: Session) -> None:
    if db.query(User.id).filter(User.is_admin.is_(True)).first():
        return
    db.add(User(
        name="Admin",
        email=settings.ADMIN_EMAIL,
        hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
        is_admin=True,
    ))
    db.commit()
    logger.info("Default admin user created (%s)", settings.ADMIN_EMAIL)


def seed_skills(db: Session) -> None:
    if db.query(Skill.id).first():
        return
    for name, description, category in DEFAULT_SKILLS:
        db.add(Skill(name=name, description=description, category=category))
    db.commit()
    logger.info("Default skills added")


def seed_demo_users(db: Session) -> None:
    skills = {s.name: s.id for s in db.query(Skill).all()}
    hashed = get_password_hash(DEMO_PASSWORD)
    for name, email, location, offered, wanted in DEMO_USERS:
        if db.query(User.id).filter(User.email == email).first():
            continue
        user = User(name=name, email=email, hashed_password=hashed, location=location)
        user.offered_skills = [
            OfferedSkill(skill_id=skills[s], experience_level=ExperienceLevel.ADVANCED)
            for s in offered if s in skills
        ]
        user.wanted_skills = [
            WantedSkill(skill_id=skills[s], priority=Priority.HIGH)
            for s in wanted if s in skills
        ]
        db.add(user)
    db.commit()
    logger.info("Demo users added")


def main():
    init_db()
    db = SessionLocal()
    try:
        seed_admin(db)
        seed_skills(db)
        if settings.SEED_DEMO_DATA:
            seed_demo_users(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Initializing database...")
    main()
    print("Database initialized successfully!")
