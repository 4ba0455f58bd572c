from __future__ import annotations

import pytest

from quizzes.assigning import RosterScope, assign
from quizzes.models import Quiz
from quizzes.submissions import submit


@pytest.mark.django_db
def test_teacher_creates_and_reads_back_quiz(api_as, teacher, three_question_payload):
    c = api_as(teacher)
    r = c.post("/api/v1/quizzes/", three_question_payload, format="json")
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Arithmetic"
    assert body["author"] == teacher.id
    assert body["version"] == 1
    assert body["locked"] is False
    assert [q["correct_option"] for q in body["questions"]] == [1, 1, 0]

    r = c.get(f"/api/v1/quizzes/{body['id']}/")
    assert r.status_code == 200
    assert r.json()["questions"][1]["options"] == ["5", "6", "7"]


@pytest.mark.django_db
def test_whitespace_is_trimmed_on_save(api_as, teacher, quiz_payload):
    payload = quiz_payload(title="  Padded  ", questions=[{"text": " Q ", "options": [" a", "b "], "correct_option": 0}])
    r = api_as(teacher).post("/api/v1/quizzes/", payload, format="json")
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Padded"
    assert body["questions"][0] == {"text": "Q", "options": ["a", "b"], "correct_option": 0}


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload, code, extra",
    [
        ({"title": "", "questions": []}, "empty_title", {}),
        ({"title": "T", "questions": []}, "no_questions", {}),
        ({"title": "T", "questions": [{"text": "", "options": ["a", "b"], "correct_option": 0}]}, "empty_question_text", {"question_index": 0}),
        ({"title": "T", "questions": [{"text": "Q", "options": ["a"], "correct_option": 0}]}, "insufficient_options", {"question_index": 0}),
        (
            {"title": "T", "questions": [{"text": "Q", "options": ["a", " "], "correct_option": 0}]},
            "empty_option",
            {"question_index": 0, "option_index": 1},
        ),
        ({"title": "T", "questions": [{"text": "Q", "options": ["a", "b"], "correct_option": 2}]}, "invalid_correct_index", {"question_index": 0}),
        ({"title": "T", "questions": [{"text": "Q", "options": ["a", "b"]}]}, "unconfirmed_correct_option", {"question_index": 0}),
    ],
)
def test_invalid_quiz_rejected_with_code(api_as, teacher, payload, code, extra):
    r = api_as(teacher).post("/api/v1/quizzes/", payload, format="json")
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == code
    assert body["detail"]
    for key, value in extra.items():
        assert body[key] == value
    assert not Quiz.objects.exists()


@pytest.mark.django_db
def test_first_failing_rule_is_reported(api_as, teacher):
    payload = {
        "title": "T",
        "questions": [
            {"text": "ok", "options": ["a", "b"], "correct_option": 0},
            {"text": "Q", "options": ["a"], "correct_option": 5},
            {"text": "", "options": [], "correct_option": None},
        ],
    }
    r = api_as(teacher).post("/api/v1/quizzes/", payload, format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "insufficient_options"
    assert r.json()["question_index"] == 1


@pytest.mark.django_db
def test_validate_action_does_not_store(api_as, teacher, quiz_payload):
    c = api_as(teacher)
    r = c.post("/api/v1/quizzes/validate/", quiz_payload(), format="json")
    assert r.status_code == 200
    assert r.json() == {"valid": True, "question_count": 1}
    r = c.post("/api/v1/quizzes/validate/", quiz_payload(title=" "), format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "empty_title"
    assert not Quiz.objects.exists()


@pytest.mark.django_db
def test_students_cannot_author(api_as, student, quiz_payload):
    r = api_as(student).post("/api/v1/quizzes/", quiz_payload(), format="json")
    assert r.status_code == 403
    r = api_as().get("/api/v1/quizzes/")
    assert r.status_code in (401, 403)


@pytest.mark.django_db
def test_list_is_scoped_to_author_and_filterable(api_as, teacher, other_teacher, course, quiz_payload):
    c = api_as(teacher)
    c.post("/api/v1/quizzes/", quiz_payload(title="In course", course=course.id), format="json")
    c.post("/api/v1/quizzes/", quiz_payload(title="Loose"), format="json")
    api_as(other_teacher).post("/api/v1/quizzes/", quiz_payload(title="Theirs"), format="json")

    r = c.get("/api/v1/quizzes/?ordering=title")
    assert r.status_code == 200
    assert r.json()["count"] == 2
    assert [q["title"] for q in r.json()["results"]] == ["In course", "Loose"]
    r = c.get(f"/api/v1/quizzes/?course={course.id}")
    assert [q["title"] for q in r.json()["results"]] == ["In course"]


@pytest.mark.django_db
def test_other_teacher_cannot_touch_quiz(api_as, teacher, other_teacher, quiz_payload):
    quiz_id = api_as(teacher).post("/api/v1/quizzes/", quiz_payload(), format="json").json()["id"]
    c = api_as(other_teacher)
    assert c.get(f"/api/v1/quizzes/{quiz_id}/").status_code == 403
    r = c.patch(f"/api/v1/quizzes/{quiz_id}/", {"title": "Mine"}, format="json")
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"
    assert c.delete(f"/api/v1/quizzes/{quiz_id}/").status_code == 403
    assert Quiz.objects.get(pk=quiz_id).title == "Basics"


@pytest.mark.django_db
def test_missing_quiz_is_404(api_as, teacher):
    r = api_as(teacher).get("/api/v1/quizzes/999/")
    assert r.status_code == 404
    assert r.json()["code"] == "quiz_not_found"


@pytest.mark.django_db
def test_patch_and_put(api_as, teacher, quiz_payload, three_question_payload):
    c = api_as(teacher)
    quiz_id = c.post("/api/v1/quizzes/", quiz_payload(), format="json").json()["id"]
    r = c.patch(f"/api/v1/quizzes/{quiz_id}/", {"title": "Renamed"}, format="json")
    assert r.status_code == 200
    assert r.json()["title"] == "Renamed"
    assert len(r.json()["questions"]) == 1

    r = c.put(f"/api/v1/quizzes/{quiz_id}/", three_question_payload, format="json")
    assert r.status_code == 200
    assert r.json()["title"] == "Arithmetic"
    assert len(r.json()["questions"]) == 3

    r = c.patch(f"/api/v1/quizzes/{quiz_id}/", {"questions": []}, format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "no_questions"


@pytest.mark.django_db
def test_locked_quiz_rejects_edits_but_can_be_versioned(api_as, teacher, student, quiz_payload):
    c = api_as(teacher)
    quiz_id = c.post("/api/v1/quizzes/", quiz_payload(), format="json").json()["id"]
    a = assign(quiz_id, RosterScope.of([student.id]))
    submit(a.pk, student.id, [1])

    assert c.get(f"/api/v1/quizzes/{quiz_id}/").json()["locked"] is True
    r = c.patch(f"/api/v1/quizzes/{quiz_id}/", {"title": "Changed"}, format="json")
    assert r.status_code == 409
    assert r.json()["code"] == "locked"

    r = c.post(f"/api/v1/quizzes/{quiz_id}/versions/", {"title": "Basics v2"}, format="json")
    assert r.status_code == 201
    body = r.json()
    assert body["version"] == 2
    assert body["previous_version"] == quiz_id
    assert body["locked"] is False


@pytest.mark.django_db
def test_delete_removes_quiz(api_as, teacher, quiz_payload):
    c = api_as(teacher)
    quiz_id = c.post("/api/v1/quizzes/", quiz_payload(), format="json").json()["id"]
    assert c.delete(f"/api/v1/quizzes/{quiz_id}/").status_code == 204
    assert c.get(f"/api/v1/quizzes/{quiz_id}/").status_code == 404


@pytest.mark.django_db
def test_overlong_title_is_a_validation_error(api_as, teacher, quiz_payload):
    r = api_as(teacher).post("/api/v1/quizzes/", quiz_payload(title="x" * 201), format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "title_too_long"
    assert not Quiz.objects.exists()
