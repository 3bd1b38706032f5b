"""SQLAlchemy ORM models backing the SQL record store.

Tables mirror the record schemas one-to-one. String lists (allergies, tags,
ingredients, instructions) are stored as JSON-encoded text. Every table uses
SQLite AUTOINCREMENT so deleted ids are never handed out again.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    """ORM model representing an application user."""

    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    allergies = Column(Text, nullable=True)

    # usernames and emails are unique regardless of case
    __table_args__ = (
        Index("uq_users_username_lower", func.lower(username), unique=True),
        Index("uq_users_email_lower", func.lower(email), unique=True),
        {"sqlite_autoincrement": True},
    )


class GlucoseReading(Base):
    __tablename__ = "glucose_readings"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    value = Column(Integer, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    type = Column(String, nullable=False)
    note = Column(Text, nullable=True)


class MealPlan(Base):
    __tablename__ = "meal_plans"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    meal_type = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    carbs = Column(Integer, nullable=True)
    servings = Column(Integer, nullable=True)
    prep_time = Column(Integer, nullable=True)
    tags = Column(Text, nullable=True)
    ingredients = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, index=True)


class Note(Base):
    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    category = Column(String, nullable=True)
