"""Shared fixtures: fresh stores, fake meal generators and API clients."""

import os

# must be set before core.config is imported; `main.app` then stays in memory
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient

from core.exceptions import UpstreamError
from database.store import create_memory_store, create_sql_store
from main import create_app
from schemas.meal_schema import GeneratedMeal
from services.meal_generator import MealGenerator
from services.meal_plan_service import MealPlanService

PASSWORD = "password123"


class FakeMealGenerator(MealGenerator):
    """Deterministic generator recording what it was asked for."""

    def __init__(self, ingredients=None):
        self.calls = []
        self.ingredients = ingredients or ["Chicken breast", "Peanut sauce", "Spinach"]

    def generate(self, meal_type, allergies):
        self.calls.append((meal_type, list(allergies)))
        return GeneratedMeal(
            name=f"Test {meal_type}",
            description="Generated for tests",
            meal_type=meal_type,
            carbs=20,
            servings=2,
            prep_time=15,
            tags=["Test"],
            ingredients=list(self.ingredients),
            instructions=["Cook", "Serve"],
        )


class FailingMealGenerator(MealGenerator):
    def __init__(self, exc=None):
        self.exc = exc or UpstreamError("provider down", provider="fake")
        self.calls = 0

    def generate(self, meal_type, allergies):
        self.calls += 1
        raise self.exc


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """A fresh, empty record store for each backend."""
    if request.param == "memory":
        s = create_memory_store()
    else:
        s = create_sql_store("sqlite://")
    yield s
    s.close()


@pytest.fixture
def memory_store():
    return create_memory_store()


@pytest.fixture
def app(memory_store):
    """Application on an empty memory store that only serves sample recipes."""
    return create_app(store=memory_store, meal_plan_service=MealPlanService(None), seed_demo=False)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def other_client(app):
    """Second client on the same app, so a second user has its own cookie jar."""
    return TestClient(app)


def register(client, username="demo", email=None, password=PASSWORD, **extra):
    """Register a user through the API and return the response."""
    body = {
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
        "confirmPassword": password,
    }
    body.update(extra)
    return client.post("/api/auth/register", json=body)


@pytest.fixture
def user(client):
    """Registered and logged-in user on `client`."""
    res = register(client, "alice", allergies=["peanuts"])
    assert res.status_code == 201
    return res.json()["user"]


@pytest.fixture
def other_user(other_client):
    res = register(other_client, "bob")
    assert res.status_code == 201
    return res.json()["user"]
