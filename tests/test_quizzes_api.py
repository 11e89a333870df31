"""
Tests for quiz browsing, start and submission endpoints
"""
import uuid

from app.models import QuizAttempt
from conftest import OTHER_USER_ID, USER_ID, make_question, make_quiz


def test_list_quizzes_only_returns_active(client, db):
    question = make_question(db)
    make_quiz(db, [question], title="Visible quiz")
    make_quiz(db, [question], title="Hidden quiz", is_active=False)

    response = client.get("/api/quizzes/")

    assert response.status_code == 200
    titles = [quiz["title"] for quiz in response.json()]
    assert titles == ["Visible quiz"]
    assert response.json()[0]["total_questions"] == 1


def test_list_quizzes_filters_by_category_and_search(client, db):
    question = make_question(db)
    make_quiz(db, [question], title="Planets and stars", category="Astronomy")
    make_quiz(db, [question], title="Famous battles", category="History")

    by_category = client.get("/api/quizzes/", params={"category": "History"}).json()
    assert [quiz["title"] for quiz in by_category] == ["Famous battles"]

    everything = client.get("/api/quizzes/", params={"category": "all"}).json()
    assert len(everything) == 2

    by_text = client.get("/api/quizzes/", params={"search": "PLANETS"}).json()
    assert [quiz["title"] for quiz in by_text] == ["Planets and stars"]


def test_categories_are_distinct_and_sorted(client, db):
    question = make_question(db)
    make_quiz(db, [question], category="Math")
    make_quiz(db, [question], category="Art")
    make_quiz(db, [question], category="Math")
    make_quiz(db, [question], category="Secret", is_active=False)

    response = client.get("/api/quizzes/categories")

    assert response.json() == ["Art", "Math"]


def test_get_quiz_includes_answer_key(client, four_question_quiz):
    response = client.get(f"/api/quizzes/{four_question_quiz.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["total_questions"] == 4
    assert [q["correct_option_index"] for q in body["questions"]] == [0, 1, 2, 3]


def test_get_inactive_quiz_is_not_found(client, db):
    quiz = make_quiz(db, [make_question(db)], is_active=False)

    response = client.get(f"/api/quizzes/{quiz.id}")

    assert response.status_code == 404
    assert response.json()["message"] == "Quiz not found"


def test_start_strips_answers(client, four_question_quiz, user_headers):
    response = client.get(f"/api/quizzes/{four_question_quiz.id}/start", headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total_questions"] == 4
    assert body["time_limit_minutes"] == 10
    for question in body["questions"]:
        assert set(question) == {"id", "question", "options"}
    assert "correct_option_index" not in response.text
    assert "explanation" not in response.text


def test_start_is_repeatable(client, four_question_quiz, user_headers):
    url = f"/api/quizzes/{four_question_quiz.id}/start"

    first = client.get(url, headers=user_headers).json()
    second = client.get(url, headers=user_headers).json()

    assert first["total_questions"] == second["total_questions"]
    assert [q["id"] for q in first["questions"]] == [q["id"] for q in second["questions"]]


def test_start_keeps_stored_question_order(client, db, user_headers):
    questions = [make_question(db, text=f"Step {index}?") for index in range(5)]
    quiz = make_quiz(db, [questions[3], questions[0], questions[4], questions[1], questions[2]])

    body = client.get(f"/api/quizzes/{quiz.id}/start", headers=user_headers).json()

    assert [q["question"] for q in body["questions"]] == [
        "Step 3?", "Step 0?", "Step 4?", "Step 1?", "Step 2?"
    ]


def test_start_inactive_or_unknown_quiz_is_not_found(client, db, user_headers):
    quiz = make_quiz(db, [make_question(db)], is_active=False)

    assert client.get(f"/api/quizzes/{quiz.id}/start", headers=user_headers).status_code == 404
    assert client.get(f"/api/quizzes/{uuid.uuid4()}/start", headers=user_headers).status_code == 404


def test_start_requires_user_header(client, four_question_quiz):
    response = client.get(f"/api/quizzes/{four_question_quiz.id}/start")

    assert response.status_code == 401
    assert response.json()["error"] == "authentication_error"


def test_malformed_user_header_is_rejected(client, four_question_quiz):
    response = client.get(
        f"/api/quizzes/{four_question_quiz.id}/start", headers={"X-User-Id": "not-a-uuid"}
    )

    assert response.status_code == 401


def test_submit_all_correct(client, db, four_question_quiz, user_headers):
    response = client.post(
        f"/api/quizzes/{four_question_quiz.id}/submit",
        json={"answers": [0, 1, 2, 3], "time_taken_seconds": 95},
        headers=user_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 4
    assert body["total_questions"] == 4
    assert body["percentage"] == 100.0
    assert body["time_taken_seconds"] == 95

    attempt = db.query(QuizAttempt).filter(QuizAttempt.id == uuid.UUID(body["attempt_id"])).one()
    assert attempt.score == 4
    assert attempt.completed is True
    assert attempt.user_id == USER_ID
    assert len(attempt.answers) == 4


def test_submit_partial_and_out_of_range(client, db, four_question_quiz, user_headers):
    response = client.post(
        f"/api/quizzes/{four_question_quiz.id}/submit",
        json={"answers": [0, 1, 9, None], "time_taken_seconds": 30},
        headers=user_headers,
    )

    body = response.json()
    assert body["score"] == 2
    assert body["percentage"] == 50.0
    assert [item["is_correct"] for item in body["answers"]] == [True, True, False, False]
    assert body["answers"][2]["selected_option_index"] is None
    assert body["answers"][0]["explanation"] == "Because."

    attempt = db.query(QuizAttempt).one()
    assert [entry["selected_option_index"] for entry in attempt.answers] == [0, 1, None, None]


def test_submit_unknown_quiz_creates_no_attempt(client, db, user_headers):
    response = client.post(
        f"/api/quizzes/{uuid.uuid4()}/submit",
        json={"answers": [0], "time_taken_seconds": 5},
        headers=user_headers,
    )

    assert response.status_code == 404
    assert db.query(QuizAttempt).count() == 0


def test_submit_inactive_quiz_is_still_graded(client, db, user_headers):
    quiz = make_quiz(db, [make_question(db, correct=3)], is_active=False)

    response = client.post(
        f"/api/quizzes/{quiz.id}/submit",
        json={"answers": [3], "time_taken_seconds": 5},
        headers=user_headers,
    )

    assert response.status_code == 200
    assert response.json()["score"] == 1


def test_submit_rejects_structurally_invalid_body(client, four_question_quiz, user_headers):
    url = f"/api/quizzes/{four_question_quiz.id}/submit"

    not_a_list = client.post(url, json={"answers": "0123"}, headers=user_headers)
    negative_time = client.post(url, json={"answers": [], "time_taken_seconds": -1}, headers=user_headers)

    assert not_a_list.status_code == 400
    assert not_a_list.json()["error"] == "validation_error"
    assert negative_time.status_code == 400


def test_duplicate_submissions_create_separate_attempts(client, db, four_question_quiz, user_headers):
    url = f"/api/quizzes/{four_question_quiz.id}/submit"
    payload = {"answers": [0, 0, 0, 0], "time_taken_seconds": 10}

    first = client.post(url, json=payload, headers=user_headers).json()
    second = client.post(url, json=payload, headers=user_headers).json()

    assert first["attempt_id"] != second["attempt_id"]
    assert db.query(QuizAttempt).count() == 2


def test_attempt_history_is_per_user(client, four_question_quiz, user_headers):
    url = f"/api/quizzes/{four_question_quiz.id}/submit"
    client.post(url, json={"answers": [0, 1, 0, 0]}, headers=user_headers)
    client.post(url, json={"answers": [0]}, headers={"X-User-Id": str(OTHER_USER_ID)})

    response = client.get("/api/quizzes/attempts", headers=user_headers)

    assert response.status_code == 200
    history = response.json()
    assert len(history) == 1
    assert history[0]["quiz_title"] == "General Science"
    assert history[0]["score"] == 2
    assert history[0]["percentage"] == 50.0


def test_attempt_detail_is_owner_only(client, four_question_quiz, user_headers):
    submitted = client.post(
        f"/api/quizzes/{four_question_quiz.id}/submit",
        json={"answers": [0, 1, 2, 3], "time_taken_seconds": 12},
        headers=user_headers,
    ).json()
    url = f"/api/quizzes/attempts/{submitted['attempt_id']}"

    own = client.get(url, headers=user_headers)
    other = client.get(url, headers={"X-User-Id": str(OTHER_USER_ID)})
    missing = client.get(f"/api/quizzes/attempts/{uuid.uuid4()}", headers=user_headers)

    assert own.status_code == 200
    assert [a["selected_option_index"] for a in own.json()["answers"]] == [0, 1, 2, 3]
    assert other.status_code == 403
    assert missing.status_code == 404


def test_list_quizzes_newest_first(client, db):
    question = make_question(db)
    for title in ("First quiz", "Second quiz", "Third quiz"):
        make_quiz(db, [question], title=title)

    titles = [quiz["title"] for quiz in client.get("/api/quizzes/").json()]

    assert titles == ["Third quiz", "Second quiz", "First quiz"]


def test_attempt_history_newest_first(client, four_question_quiz, user_headers):
    url = f"/api/quizzes/{four_question_quiz.id}/submit"
    for answers in ([0], [0, 1], [0, 1, 2]):
        client.post(url, json={"answers": answers, "time_taken_seconds": 1}, headers=user_headers)

    history = client.get("/api/quizzes/attempts", headers=user_headers).json()

    assert [attempt["score"] for attempt in history] == [3, 2, 1]
    timestamps = [attempt["created_at"] for attempt in history]
    assert timestamps == sorted(timestamps, reverse=True)
    assert len(set(timestamps)) == 3
