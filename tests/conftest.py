"""
Shared fixtures: in-memory SQLite database and a FastAPI test client
"""
import os

# Must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid

import pytest
from fastapi.testclient import TestClient

import app.models  # noqa: F401
from app.database import Base, SessionLocal, engine
from app.main import app as fastapi_app
from app.models import Question, Quiz, QuizQuestion
from app.utils.cache import cache_service

ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
USER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b2")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c3")


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # No context manager: startup hooks (Redis connect) are not run
    return TestClient(fastapi_app)


@pytest.fixture
def user_headers():
    return {"X-User-Id": str(USER_ID)}


@pytest.fixture
def admin_headers():
    return {"X-User-Id": str(ADMIN_ID)}


class FakeRedis:
    """Dict-backed stand-in for the few redis-py calls the cache makes"""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    def keys(self, pattern):
        prefix = pattern.rstrip("*")
        return [key for key in self.store if key.startswith(prefix)]

    def close(self):
        pass


@pytest.fixture
def fake_redis():
    fake = FakeRedis()
    cache_service.redis_client = fake
    yield fake
    cache_service.redis_client = None


def make_question(db, correct=0, category="Science", text=None, explanation="Because."):
    question = Question(
        question=text or f"Question {uuid.uuid4().hex[:6]}?",
        options=["A", "B", "C", "D"],
        correct_option_index=correct,
        category=category,
        difficulty="medium",
        explanation=explanation,
        created_by=ADMIN_ID,
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    return question


def make_quiz(db, questions, title="General Science", category="Science", is_active=True):
    quiz = Quiz(
        title=title,
        description="A quiz about everyday science facts.",
        time_limit_minutes=10,
        category=category,
        is_active=is_active,
        created_by=ADMIN_ID,
    )
    quiz.question_links = [
        QuizQuestion(question_id=question.id, position=position)
        for position, question in enumerate(questions)
    ]
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    return quiz


@pytest.fixture
def four_question_quiz(db):
    """Quiz whose correct indices are [0, 1, 2, 3]"""
    questions = [make_question(db, correct=index) for index in range(4)]
    return make_quiz(db, questions)
