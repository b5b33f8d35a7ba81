import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="quizcraft-uploads-"))

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from quizcraft.core.database import Base, enable_sqlite_foreign_keys, get_db
from quizcraft.routes.play.play_routers import session_store
from quizcraft.schemas.quiz.quiz_base import AnswerBase, PersonalityTypeBase, QuestionBase, QuizTree
from quizcraft.services.storage import LocalBlobStore, get_blob_store


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "uploads"), "/uploads")


@pytest.fixture
def client(session_factory, blob_store):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    session_store.sessions.clear()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    session_store.sessions.clear()


@pytest.fixture
def register_user(client):
    """Register and log in a user; returns the auth headers."""

    def _register(email="author@example.com", password="secret123", full_name="Quiz Author"):
        response = client.post(
            "/users/register",
            json={"email": email, "password": password, "full_name": full_name},
        )
        assert response.status_code == 201, response.text
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register_user):
    return register_user()


def make_quiz(type_names=("A", "B"), questions=(((3, "A"), (1, "B")),), title="Which Letter Are You?"):
    """Build a quiz tree: each question is a sequence of (weight, type name) answers."""
    types = [PersonalityTypeBase(name=name, description=f"You are {name}.") for name in type_names]
    by_name = {t.name: t.id for t in types}
    return QuizTree(
        title=title,
        description="Find your letter.",
        personality_types=types,
        questions=[
            QuestionBase(
                text=f"Question {q_index + 1}",
                order_index=q_index,
                answers=[
                    AnswerBase(
                        text=f"Answer {a_index + 1}",
                        personality_type_id=by_name.get(type_name, uuid4()),
                        weight=weight,
                        order_index=a_index,
                    )
                    for a_index, (weight, type_name) in enumerate(answers)
                ],
            )
            for q_index, answers in enumerate(questions)
        ],
    )


@pytest.fixture
def quiz_factory():
    return make_quiz


@pytest.fixture
def sample_quiz():
    return make_quiz()


@pytest.fixture
def quiz_payload():
    """JSON body for POST /quizzes/: types A and B, one question (3 -> A, 1 -> B)."""
    type_a, type_b = str(uuid4()), str(uuid4())
    return {
        "title": "Which Letter Are You?",
        "description": "Find your letter.",
        "personality_types": [
            {"id": type_a, "name": "A", "description": "You are A."},
            {"id": type_b, "name": "B", "description": "You are B."},
        ],
        "questions": [
            {
                "text": "Pick one",
                "answers": [
                    {"text": "Strongly A", "personality_type_id": type_a, "weight": 3},
                    {"text": "Mildly B", "personality_type_id": type_b, "weight": 1},
                ],
            }
        ],
    }
