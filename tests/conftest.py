"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from recipe_finder.api.dependencies import get_session_factory, get_spoonacular_client
from recipe_finder.database import Base
from recipe_finder.main import app
from recipe_finder.services.spoonacular import SpoonacularClient

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/recipe_finder", "/recipe_finder_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from recipe_finder import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def recipe_info():
    """A recipe information payload as returned by Spoonacular."""
    return {
        "id": 715538,
        "title": "Bruschetta Style Pork & Pasta",
        "image": "https://img.spoonacular.com/recipes/715538-556x370.jpg",
        "summary": "A quick weeknight pasta.",
        "instructions": "Boil pasta. Brown pork. Combine.",
        "readyInMinutes": 35,
        "servings": 5,
        "sourceUrl": "https://example.com/bruschetta-pork-pasta",
        "spoonacularSourceUrl": "https://spoonacular.com/bruschetta-style-pork-pasta-715538",
        "extendedIngredients": [
            {"id": 10211111, "name": "pork chops", "amount": 1.5, "unit": "lb", "image": None},
            {"id": 20420, "name": "pasta", "amount": 8, "unit": "oz", "image": "pasta.jpg"},
        ],
        "analyzedInstructions": [
            {"name": "", "steps": [{"number": 1, "step": "Boil pasta.", "ingredients": []}]}
        ],
        "diets": ["dairy free"],
        "cuisines": ["Italian"],
        "dishTypes": ["main course", "dinner"],
    }


@pytest.fixture
def mock_spoonacular():
    """Spoonacular client double with async endpoint methods."""
    client = MagicMock(spec=SpoonacularClient)
    client.find_by_ingredients = AsyncMock(return_value=[])
    client.get_recipe_information = AsyncMock()
    return client


@pytest.fixture
def session_factory():
    """Session factory bound to the test database."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def client(db, session_factory, mock_spoonacular):
    """Create a test client with database and Spoonacular overrides."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_spoonacular_client] = lambda: mock_spoonacular
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
