from __future__ import annotations

import os
from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from okr_app.core.config import settings
from okr_app.db import Base, make_engine


def is_test_mode() -> bool:
    return os.getenv("OKR_TEST_MODE") == "1"


def configure_test_overrides(app: FastAPI) -> None:
    """Serve every request from a freshly recreated test database."""
    from okr_app.db import get_db as real_get_db

    test_engine = make_engine(settings.test_database_url)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[real_get_db] = override_get_db
