import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from okr_app.db import Base
from okr_app import models  # noqa: F401  (registers tables on Base.metadata)


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()

    yield session

    session.close()


@pytest.fixture
def sample_objective_data():
    """Sample objective data for testing."""
    return {
        "title": "Grow the customer base",
        "description": "Reach more paying customers this quarter",
        "owner": "Sales"
    }


@pytest.fixture
def sample_kr_data():
    """Sample increase_to key result: 0 -> 100, currently 25."""
    return {
        "title": "Sign 100 new customers",
        "key_result_type": "increase_to",
        "base_value": 0,
        "current_value": 25,
        "target_value": 100,
        "unit": "number"
    }
