"""Shared fixtures: in-memory SQLite session, temp bill cache, API client."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import create_tables, get_db
from app.services.bill_cache import BillCache, get_bill_cache


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def bill_cache(tmp_path):
    return BillCache(str(tmp_path / "bills" / "saved_bills.json"))


@pytest.fixture
def client(db, bill_cache):
    from fastapi.testclient import TestClient
    from app.main import app

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_bill_cache] = lambda: bill_cache
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
