# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from fitchain.app import app
from fitchain.core import get_session


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


class ApiTestCase(unittest.TestCase):
    """Runs the app against a fresh in-memory database per test."""

    def setUp(self) -> None:
        self.engine = make_engine()

        def _session():
            with Session(self.engine) as session:
                yield session

        app.dependency_overrides[get_session] = _session
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()
        self.engine.dispose()

    def session(self) -> Session:
        return Session(self.engine)
