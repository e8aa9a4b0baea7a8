"""Shared fixtures for the intake tests."""

from __future__ import annotations

import pytest
from fichas import LEGACY_FICHA, MODERN_FICHA_A, MODERN_FICHA_B
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from models import Base

from intake.loaders import CaseStore


@pytest.fixture
def modern_batch() -> str:
    return MODERN_FICHA_A + "\n\n" + MODERN_FICHA_B


@pytest.fixture
def legacy_ficha() -> str:
    return LEGACY_FICHA


@pytest.fixture
def store():
    """CaseStore over a fresh in-memory SQLite database."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session = Session(engine)
    yield CaseStore(session, engine=engine)
    session.close()
    engine.dispose()
