"""Tests for the quiz authoring endpoints."""

import json
from uuid import UUID, uuid4

import pytest

from quizcraft.models.quiz_db.personality_type_db import PersonalityType
from quizcraft.models.quiz_db.question_db import Question
from quizcraft.models.quiz_db.quiz_answer_db import QuizAnswer


def create(client, headers, payload):
    response = client.post("/quizzes/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def upload_document(client, path, headers, document, method="post"):
    body = json.dumps(document).encode("utf-8") if isinstance(document, dict) else document
    return client.request(
        method.upper(),
        path,
        files={"file": ("quiz.json", body, "application/json")},
        headers=headers,
    )


@pytest.fixture
def import_document():
    return {
        "title": "Imported Quiz",
        "description": "From a file",
        "personalityTypes": [{"name": "A", "description": "a"}, {"name": "B", "description": "b"}],
        "questions": [
            {"text": "One", "answers": [{"text": "a", "personalityType": "A", "weight": 1}]},
            {"text": "Two", "answers": [{"text": "b", "personalityType": "B", "weight": 2}]},
        ],
    }


class TestCreateAndRead:
    def test_create_returns_nested_tree(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)

        assert quiz["slug"] == "which-letter-are-you"
        assert quiz["is_published"] is False
        assert [t["name"] for t in quiz["personality_types"]] == ["A", "B"]
        assert [t["color"] for t in quiz["personality_types"]] == ["#3B82F6", "#8B5CF6"]
        answers = quiz["questions"][0]["answers"]
        assert [a["order_index"] for a in answers] == [0, 1]
        assert answers[0]["personality_type_id"] == quiz_payload["personality_types"][0]["id"]

    def test_get_own_quiz(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)

        response = client.get(f"/quizzes/{quiz['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == quiz

    def test_other_users_cannot_touch_quiz(self, client, auth_headers, register_user, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        intruder = register_user(email="intruder@example.com")

        assert client.get(f"/quizzes/{quiz['id']}", headers=intruder).status_code == 403
        assert client.delete(f"/quizzes/{quiz['id']}", headers=intruder).status_code == 403

    def test_missing_quiz(self, client, auth_headers):
        assert client.get(f"/quizzes/{uuid4()}", headers=auth_headers).status_code == 404

    def test_requires_login(self, client, quiz_payload):
        assert client.post("/quizzes/", json=quiz_payload).status_code == 401


class TestSaveValidation:
    def test_answer_with_unknown_type_is_rejected(self, client, auth_headers, quiz_payload):
        ghost = str(uuid4())
        quiz_payload["questions"][0]["answers"][1]["personality_type_id"] = ghost

        response = client.post("/quizzes/", json=quiz_payload, headers=auth_headers)

        assert response.status_code == 422
        body = response.json()
        assert body["personality_type_id"] == ghost
        assert (body["question_index"], body["answer_index"]) == (0, 1)

    def test_missing_title(self, client, auth_headers, quiz_payload):
        quiz_payload["title"] = ""

        response = client.post("/quizzes/", json=quiz_payload, headers=auth_headers)

        assert response.status_code == 422
        assert "title" in response.json()["detail"]

    def test_malformed_slug(self, client, auth_headers, quiz_payload):
        quiz_payload["slug"] = "Not A Slug"

        response = client.post("/quizzes/", json=quiz_payload, headers=auth_headers)

        assert response.status_code == 422

    def test_duplicate_slug(self, client, auth_headers, quiz_payload):
        quiz_payload["slug"] = "letters"
        create(client, auth_headers, quiz_payload)
        second = dict(quiz_payload, personality_types=[], questions=[])

        response = client.post("/quizzes/", json=second, headers=auth_headers)

        assert response.status_code == 422
        assert "already in use" in response.json()["detail"]

    def test_derived_slug_gets_suffix(self, client, auth_headers, quiz_payload):
        create(client, auth_headers, quiz_payload)
        second = create(client, auth_headers, dict(quiz_payload, personality_types=[], questions=[]))

        assert second["slug"] == "which-letter-are-you-2"

    def test_identifiers_of_another_quiz_are_rejected(self, client, auth_headers, quiz_payload):
        create(client, auth_headers, quiz_payload)

        response = client.post("/quizzes/", json=dict(quiz_payload, slug="copy"), headers=auth_headers)

        assert response.status_code == 422
        assert "conflicts" in response.json()["detail"]

    def test_duplicate_type_ids_are_rejected(self, client, auth_headers, quiz_payload):
        types = quiz_payload["personality_types"]
        types[1]["id"] = types[0]["id"]

        response = client.post("/quizzes/", json=quiz_payload, headers=auth_headers)

        assert response.status_code == 422
        assert "Duplicate personality type id" in response.json()["detail"]


class TestUpdate:
    def test_retitle_without_slug_keeps_public_url(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        edited = dict(quiz, title="Which Vowel Are You?")
        del edited["slug"]

        response = client.put(f"/quizzes/{quiz['id']}", json=edited, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["title"] == "Which Vowel Are You?"
        assert response.json()["slug"] == quiz["slug"]

    def test_reorder_keeps_ids_and_rederives_indices(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        quiz["questions"][0]["answers"].reverse()
        quiz["questions"].append({"text": "Second question", "answers": []})

        response = client.put(f"/quizzes/{quiz['id']}", json=quiz, headers=auth_headers)

        assert response.status_code == 200
        updated = response.json()
        assert [t["id"] for t in updated["personality_types"]] == [t["id"] for t in quiz["personality_types"]]
        answers = updated["questions"][0]["answers"]
        assert [a["text"] for a in answers] == ["Mildly B", "Strongly A"]
        assert [a["order_index"] for a in answers] == [0, 1]
        assert [q["order_index"] for q in updated["questions"]] == [0, 1]

    def test_removed_children_are_deleted(self, client, auth_headers, quiz_payload, session_factory):
        quiz = create(client, auth_headers, quiz_payload)
        removed_type = quiz["personality_types"][1]["id"]
        quiz["personality_types"] = quiz["personality_types"][:1]
        quiz["questions"][0]["answers"] = quiz["questions"][0]["answers"][:1]

        response = client.put(f"/quizzes/{quiz['id']}", json=quiz, headers=auth_headers)

        assert response.status_code == 200
        db = session_factory()
        try:
            assert db.query(PersonalityType).filter(PersonalityType.id == UUID(removed_type)).count() == 0
            assert db.query(QuizAnswer).count() == 1
        finally:
            db.close()

    def test_invalid_update_changes_nothing(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        edited = json.loads(json.dumps(quiz))
        edited["title"] = "Changed"
        edited["personality_types"] = edited["personality_types"][:1]

        response = client.put(f"/quizzes/{quiz['id']}", json=edited, headers=auth_headers)

        assert response.status_code == 422
        assert client.get(f"/quizzes/{quiz['id']}", headers=auth_headers).json() == quiz


class TestPublishing:
    def test_publish_and_list(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        assert client.get("/quizzes/").json()["total"] == 0

        response = client.post(f"/quizzes/{quiz['id']}/publish", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["is_published"] is True
        listing = client.get("/quizzes/").json()
        assert listing["total"] == 1
        assert listing["items"][0]["slug"] == quiz["slug"]

    def test_publish_requires_questions(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, dict(quiz_payload, questions=[]))

        response = client.post(f"/quizzes/{quiz['id']}/publish", headers=auth_headers)

        assert response.status_code == 422
        assert "question" in response.json()["detail"]

    def test_unpublish(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        client.post(f"/quizzes/{quiz['id']}/publish", headers=auth_headers)

        response = client.post(f"/quizzes/{quiz['id']}/unpublish", headers=auth_headers)

        assert response.json()["is_published"] is False

    def test_mine_and_stats(self, client, auth_headers, register_user, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)
        create(client, auth_headers, dict(quiz_payload, slug="second", personality_types=[], questions=[]))
        client.post(f"/quizzes/{quiz['id']}/publish", headers=auth_headers)
        other = register_user(email="other@example.com")
        create(client, other, dict(quiz_payload, slug="someone-elses", personality_types=[], questions=[]))

        mine = client.get("/quizzes/mine", params={"size": 1}, headers=auth_headers).json()
        stats = client.get("/quizzes/stats", headers=auth_headers).json()

        assert mine["total"] == 2
        assert len(mine["items"]) == 1
        assert mine["has_next"] is True
        assert stats == {"total_quizzes": 2, "published_quizzes": 1, "total_takes": 0}


class TestDelete:
    def test_delete_cascades(self, client, auth_headers, quiz_payload, session_factory):
        quiz = create(client, auth_headers, quiz_payload)

        response = client.delete(f"/quizzes/{quiz['id']}", headers=auth_headers)

        assert response.status_code == 204
        assert client.get(f"/quizzes/{quiz['id']}", headers=auth_headers).status_code == 404
        db = session_factory()
        try:
            assert db.query(Question).count() == 0
            assert db.query(QuizAnswer).count() == 0
            assert db.query(PersonalityType).count() == 0
        finally:
            db.close()


class TestImportExport:
    def test_import_creates_quiz(self, client, auth_headers, import_document):
        response = upload_document(client, "/quizzes/import", auth_headers, import_document)

        assert response.status_code == 201, response.text
        quiz = response.json()
        assert quiz["slug"] == "imported-quiz"
        type_ids = {t["name"]: t["id"] for t in quiz["personality_types"]}
        assert quiz["questions"][1]["answers"][0]["personality_type_id"] == type_ids["B"]

    def test_import_with_unknown_type_name(self, client, auth_headers, import_document):
        import_document["questions"][0]["answers"][0]["personalityType"] = "Ghost"

        response = upload_document(client, "/quizzes/import", auth_headers, import_document)

        assert response.status_code == 422
        assert response.json()["personality_type"] == "Ghost"
        assert client.get("/quizzes/mine", headers=auth_headers).json()["total"] == 0

    def test_import_invalid_json(self, client, auth_headers):
        response = upload_document(client, "/quizzes/import", auth_headers, b"{broken")

        assert response.status_code == 422
        assert response.json()["detail"].startswith("Invalid quiz document")

    def test_import_into_existing_quiz(self, client, auth_headers, quiz_payload, import_document):
        quiz = create(client, auth_headers, quiz_payload)

        response = upload_document(
            client, f"/quizzes/{quiz['id']}/import", auth_headers, import_document, method="put"
        )

        assert response.status_code == 200
        replaced = response.json()
        assert replaced["id"] == quiz["id"]
        assert replaced["title"] == "Imported Quiz"
        assert replaced["slug"] == quiz["slug"]
        assert [q["text"] for q in replaced["questions"]] == ["One", "Two"]

    def test_failed_import_into_existing_quiz_changes_nothing(
        self, client, auth_headers, quiz_payload, import_document
    ):
        quiz = create(client, auth_headers, quiz_payload)
        import_document["questions"][1]["answers"][0]["personalityType"] = "Ghost"

        response = upload_document(
            client, f"/quizzes/{quiz['id']}/import", auth_headers, import_document, method="put"
        )

        assert response.status_code == 422
        assert client.get(f"/quizzes/{quiz['id']}", headers=auth_headers).json() == quiz

    def test_export(self, client, auth_headers, quiz_payload):
        quiz = create(client, auth_headers, quiz_payload)

        response = client.get(f"/quizzes/{quiz['id']}/export", headers=auth_headers)

        assert response.status_code == 200
        document = response.json()
        assert document["slug"] == quiz["slug"]
        assert [a["personalityType"] for a in document["questions"][0]["answers"]] == ["A", "B"]
