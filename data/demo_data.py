"""Demo account seeded into a fresh store so the app has something to show.

Seeding is idempotent: nothing happens when the demo username already exists.
"""

from datetime import timedelta
from typing import Optional

from core.logger import get_logger
from core.security import get_password_hash
from data.sample_meals import SAMPLE_MEALS
from database.store import RecordStore
from schemas.common import utcnow
from schemas.user_schema import UserRecord

logger = get_logger("data.demo_data")

DEMO_USER = {
    "username": "demo",
    "email": "demo@example.com",
    "password": "password123",
    "name": "John Doe",
    "allergies": ["peanuts", "shellfish"],
}


def seed_demo_data(store: RecordStore) -> Optional[UserRecord]:
    """Create the demo user with a few readings, meal plans and notes.

    Returns:
        The created user, or None if the demo user was already present.
    """
    if store.get_user_by_username(DEMO_USER["username"]) is not None:
        return None

    user = store.users.create({
        "username": DEMO_USER["username"],
        "email": DEMO_USER["email"],
        "password_hash": get_password_hash(DEMO_USER["password"]),
        "name": DEMO_USER["name"],
        "allergies": list(DEMO_USER["allergies"]),
    })

    now = utcnow()
    yesterday = now - timedelta(days=1)
    two_days_ago = now - timedelta(days=2)

    readings = [
        (118, now, "before_breakfast", "Normal reading"),
        (162, yesterday, "after_lunch", "Slightly elevated"),
        (105, yesterday, "before_breakfast", "Good fasting level"),
        (183, two_days_ago, "after_meal", "High after eating pasta"),
    ]
    for value, timestamp, reading_type, note in readings:
        store.readings.create({
            "user_id": user.id,
            "value": value,
            "timestamp": timestamp,
            "type": reading_type,
            "note": note,
        })

    for meal_type in ("dinner", "breakfast"):
        store.meal_plans.create({**SAMPLE_MEALS[meal_type], "user_id": user.id})

    store.notes.create({
        "user_id": user.id,
        "title": "Increased activity today",
        "content": "Went for a 30-minute walk after breakfast. Glucose readings were stable throughout the day.",
        "timestamp": now,
        "category": "Exercise",
    })
    store.notes.create({
        "user_id": user.id,
        "title": "High reading after dinner",
        "content": "Dinner included more carbs than usual. Will try to reduce portion size next time.",
        "timestamp": yesterday,
        "category": "Diet",
    })

    logger.info("Seeded demo user id=%s", user.id)
    return user
