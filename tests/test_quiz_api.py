# tests/test_quiz_api.py

import copy

import pytest

from quiz import repository
from tests.conftest import registration_payload

PHONE = "0241234567"


@pytest.fixture
def session(client, registered, questions):
    response = client.post("/api/quiz/start", json={"phoneNumber": PHONE})
    assert response.status_code == 201
    return response.json()["session"]


def _answer(client, session_id, question_id, selected):
    return client.post(
        "/api/quiz/answer",
        json={"sessionId": session_id, "questionId": question_id, "selectedAnswer": selected},
    )


def test_start_creates_session_with_all_active_questions(client, registered, questions) -> None:
    response = client.post("/api/quiz/start", json={"phoneNumber": PHONE})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Quiz session started"
    session = body["session"]
    assert session["status"] == "active"
    assert session["fullName"] == "Grace Mensah"
    assert session["email"] == "grace@example.org"
    assert session["timeAllowed"] == 1_200_000
    assert session["timeRemaining"] == 1_200_000
    assert session["questionCount"] == 3
    assert session["answeredCount"] == 0


def test_start_requires_a_registration(client, questions) -> None:
    response = client.post("/api/quiz/start", json={"phoneNumber": "0999999999"})

    assert response.status_code == 404


def test_start_without_questions_is_rejected(client, registered) -> None:
    response = client.post("/api/quiz/start", json={"phoneNumber": PHONE})

    assert response.status_code == 400
    assert response.json()["message"] == "No quiz questions available"


def test_second_start_resumes_the_active_session(client, session, clock) -> None:
    clock.advance(minutes=3)

    response = client.post("/api/quiz/start", json={"phoneNumber": PHONE})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Resuming existing quiz session"
    assert body["session"]["id"] == session["id"]
    assert body["session"]["timeRemaining"] == 1_200_000 - 180_000


def test_start_after_completion_is_rejected(client, session) -> None:
    client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    response = client.post("/api/quiz/start", json={"phoneNumber": PHONE})

    assert response.status_code == 400
    assert response.json()["message"] == "You have already taken the quiz"


def test_questions_hide_the_correct_answer(client, session, questions) -> None:
    response = client.get(f"/api/quiz/questions/{session['id']}")

    assert response.status_code == 200
    body = response.json()
    returned = body["questions"]
    assert {q["id"] for q in returned} == {q["id"] for q in questions[:3]}
    for question in returned:
        assert set(question) == {"id", "question", "options", "selectedAnswer"}
        assert question["selectedAnswer"] is None


def test_questions_for_unknown_session_returns_404(client, store) -> None:
    response = client.get("/api/quiz/questions/77")

    assert response.status_code == 404


def test_answer_matching_the_stored_index_is_correct(client, session, questions) -> None:
    ark = questions[0]

    right = _answer(client, session["id"], ark["id"], 1)
    assert right.status_code == 200
    assert right.json()["data"] == {
        "questionId": ark["id"],
        "selectedAnswer": 1,
        "isCorrect": True,
        "answeredCount": 1,
    }

    wrong = _answer(client, session["id"], ark["id"], 2)
    assert wrong.json()["data"]["isCorrect"] is False
    assert wrong.json()["data"]["answeredCount"] == 1


def test_answers_from_a_stale_read_do_not_overwrite_each_other(client, session, questions, store, monkeypatch) -> None:
    stale = copy.deepcopy(store.sessions[session["id"]])
    _answer(client, session["id"], questions[0]["id"], 1)

    async def stale_read(session_id):
        return copy.deepcopy(stale)

    monkeypatch.setattr(repository, "get_session", stale_read)
    response = _answer(client, session["id"], questions[1]["id"], 0)

    assert response.status_code == 200
    assert response.json()["data"]["answeredCount"] == 2
    selected = {a["question_id"]: a["selected_answer"] for a in store.sessions[session["id"]]["answers"]}
    assert selected[questions[0]["id"]] == 1
    assert selected[questions[1]["id"]] == 0


def test_answer_is_shown_back_in_the_question_view(client, session, questions) -> None:
    _answer(client, session["id"], questions[1]["id"], 2)

    returned = client.get(f"/api/quiz/questions/{session['id']}").json()["questions"]

    selected = {q["id"]: q["selectedAnswer"] for q in returned}
    assert selected[questions[1]["id"]] == 2


def test_answer_for_question_outside_session_is_rejected(client, session, questions) -> None:
    response = _answer(client, session["id"], questions[3]["id"], 0)

    assert response.status_code == 400
    assert response.json()["message"] == "Question is not part of this session"


def test_answer_out_of_range_is_rejected(client, session, questions) -> None:
    response = _answer(client, session["id"], questions[1]["id"], 3)

    assert response.status_code == 400
    assert response.json()["message"] == "Selected answer is out of range"


def test_negative_answer_is_a_validation_error(client, session, questions) -> None:
    response = _answer(client, session["id"], questions[0]["id"], -1)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "selectedAnswer"


def test_submit_scores_correct_out_of_answered(client, session, questions, clock) -> None:
    _answer(client, session["id"], questions[0]["id"], 1)  # correct
    _answer(client, session["id"], questions[1]["id"], 2)  # wrong
    _answer(client, session["id"], questions[2]["id"], 3)  # correct
    clock.advance(minutes=4, seconds=30)

    response = client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "completed"
    assert data["score"] == 2
    assert data["totalQuestions"] == 3
    assert data["percentage"] == 66.67
    assert data["duration"] == 270_000
    assert data["completedAt"] is not None


def test_unanswered_questions_do_not_count_towards_total(client, session, questions) -> None:
    _answer(client, session["id"], questions[0]["id"], 1)

    data = client.post("/api/quiz/submit", json={"sessionId": session["id"]}).json()["data"]

    assert data["score"] == 1
    assert data["totalQuestions"] == 1
    assert data["questionCount"] == 3
    assert data["percentage"] == 100.0


def test_submit_twice_is_rejected(client, session) -> None:
    client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    response = client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    assert response.status_code == 400
    assert response.json()["message"] == "Quiz already submitted"


def test_answers_after_submission_are_rejected(client, session, questions) -> None:
    client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    response = _answer(client, session["id"], questions[0]["id"], 1)

    assert response.status_code == 400


def test_reading_an_expired_session_times_it_out(client, session, questions, clock) -> None:
    _answer(client, session["id"], questions[0]["id"], 1)
    clock.advance(milliseconds=1_200_001)

    response = client.get(f"/api/quiz/session/{PHONE}")

    assert response.status_code == 200
    timed_out = response.json()["session"]
    assert timed_out["status"] == "timeout"
    assert timed_out["timeRemaining"] == 0
    assert timed_out["score"] == 1
    assert timed_out["totalQuestions"] == 1
    assert timed_out["duration"] == 1_200_000


def test_session_exactly_at_the_limit_is_still_active(client, session, clock) -> None:
    clock.advance(milliseconds=1_200_000)

    response = client.get(f"/api/quiz/session/{PHONE}")

    assert response.json()["session"]["status"] == "active"


def test_late_answer_is_rejected_and_times_out_the_session(client, session, questions, clock, store) -> None:
    clock.advance(minutes=21)

    response = _answer(client, session["id"], questions[0]["id"], 1)

    assert response.status_code == 400
    assert response.json()["message"] == "Quiz time has expired"
    assert store.sessions[session["id"]]["status"] == "timeout"


def test_submit_after_deadline_reports_expiry(client, session, clock) -> None:
    clock.advance(minutes=25)

    response = client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    assert response.status_code == 400
    assert response.json()["message"] == "Quiz time has expired"


def test_start_after_timeout_is_rejected(client, session, clock) -> None:
    clock.advance(minutes=30)

    response = client.post("/api/quiz/start", json={"phoneNumber": PHONE})

    assert response.status_code == 400


def test_session_lookup_for_unknown_phone_returns_404(client, store) -> None:
    response = client.get("/api/quiz/session/0000")

    assert response.status_code == 404
    assert response.json()["message"] == "No quiz session found"


def test_results_are_ranked_by_score_then_duration(client, questions, clock) -> None:
    players = {"100": [1, 0, 3], "200": [1, 0, 0], "300": [1, 0, 3]}
    for phone, picks in players.items():
        client.post("/api/registrations", json=registration_payload(phoneNumber=phone, fullName=f"Player {phone}"))
        session = client.post("/api/quiz/start", json={"phoneNumber": phone}).json()["session"]
        for question, pick in zip(questions[:3], picks):
            _answer(client, session["id"], question["id"], pick)
        clock.advance(minutes=2 if phone == "300" else 5)
        client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    response = client.get("/api/quiz/results")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [r["phoneNumber"] for r in body["data"]] == ["300", "100", "200"]
    assert body["data"][0]["percentage"] == 100.0
    assert body["data"][2]["percentage"] == 66.67


def test_user_result_includes_breakdown(client, session, questions) -> None:
    _answer(client, session["id"], questions[0]["id"], 1)
    client.post("/api/quiz/submit", json={"sessionId": session["id"]})

    response = client.get(f"/api/quiz/result/{PHONE}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["score"] == 1
    breakdown = {a["questionId"]: a for a in data["answers"]}
    assert breakdown[questions[0]["id"]]["correctAnswer"] == 1
    assert breakdown[questions[0]["id"]]["isCorrect"] is True
    assert breakdown[questions[2]["id"]]["selectedAnswer"] is None


def test_user_result_while_active_is_rejected(client, session) -> None:
    response = client.get(f"/api/quiz/result/{PHONE}")

    assert response.status_code == 400
    assert response.json()["message"] == "Quiz not yet completed"
