from __future__ import annotations

import pytest

from courses.models import Enrolment
from quizzes.assigning import CourseScope, RosterScope, assign
from quizzes.exceptions import AssignmentNotFound
from quizzes.reporting import AttemptStatus, assignment_overview, results_for_student, summarize
from quizzes.repository import create_quiz
from quizzes.submissions import submit


@pytest.fixture
def roster(make_user):
    return [
        make_user("zed", full_name="zoe Zimmer", email="zoe@school.ca"),
        make_user("amy", full_name="Amy Adams", email="amy@school.ca"),
        make_user("bob", full_name="bob brown", email="bb@elsewhere.org"),
    ]


@pytest.mark.django_db
def test_scenario_attempted_and_not_attempted(teacher, student, make_user, quiz_payload):
    other = make_user("s2", full_name="Other Student")
    quiz = create_quiz(quiz_payload(), teacher.id)
    a = assign(quiz.pk, RosterScope.of([student.id, other.id]))
    submit(a.pk, student.id, [1])

    rows = {r.student_id: r for r in summarize(a.pk)}
    done = rows[student.id]
    assert done.status == AttemptStatus.ATTEMPTED
    assert (done.score, done.total, done.percentage) == (1, 1, 100)
    assert done.submitted_at is not None
    missing = rows[other.id]
    assert missing.status == AttemptStatus.NOT_ATTEMPTED
    assert (missing.score, missing.total, missing.percentage, missing.submitted_at) == (None, None, None, None)


@pytest.mark.django_db
def test_sorted_by_display_name_ignoring_case(teacher, roster, quiz_payload):
    quiz = create_quiz(quiz_payload(), teacher.id)
    a = assign(quiz.pk, RosterScope.of([u.id for u in roster]))
    assert [r.name for r in summarize(a.pk)] == ["Amy Adams", "bob brown", "zoe Zimmer"]


@pytest.mark.django_db
def test_display_name_falls_back_to_username(teacher, make_user, quiz_payload):
    anon = make_user("carl")
    quiz = create_quiz(quiz_payload(), teacher.id)
    a = assign(quiz.pk, RosterScope.of([anon.id]))
    assert summarize(a.pk)[0].name == "carl"


@pytest.mark.django_db
def test_free_text_filter_on_name_and_email(teacher, roster, quiz_payload):
    quiz = create_quiz(quiz_payload(), teacher.id)
    a = assign(quiz.pk, RosterScope.of([u.id for u in roster]))
    submit(a.pk, roster[1].id, [0])
    assert [r.name for r in summarize(a.pk, "ADAMS")] == ["Amy Adams"]
    assert [r.name for r in summarize(a.pk, "school.ca")] == ["Amy Adams", "zoe Zimmer"]
    assert summarize(a.pk, "nobody") == []
    assert len(summarize(a.pk, "   ")) == 3
    assert summarize(a.pk, "amy")[0].percentage == 0


@pytest.mark.django_db
def test_course_scope_reports_current_enrolment(teacher, course, roster, enrol, quiz_payload):
    quiz = create_quiz(quiz_payload(), teacher.id)
    a = assign(quiz.pk, CourseScope(course.id))
    assert summarize(a.pk) == []
    enrol(course, *roster)
    submit(a.pk, roster[0].id, [1])
    rows = summarize(a.pk)
    assert len(rows) == 3
    assert sum(1 for r in rows if r.status == AttemptStatus.ATTEMPTED) == 1
    # Leaving without submitting drops a student from the report
    Enrolment.objects.filter(student=roster[1]).delete()
    assert roster[1].id not in {r.student_id for r in summarize(a.pk)}


@pytest.mark.django_db
def test_submitted_student_stays_after_leaving_course(teacher, course, roster, enrol, quiz_payload):
    quiz = create_quiz(quiz_payload(), teacher.id)
    a = assign(quiz.pk, CourseScope(course.id))
    enrol(course, *roster)
    submit(a.pk, roster[0].id, [1])
    Enrolment.objects.filter(course=course).delete()

    rows = summarize(a.pk)
    assert [r.student_id for r in rows] == [roster[0].id]
    assert (rows[0].status, rows[0].percentage) == (AttemptStatus.ATTEMPTED, 100)
    assert assignment_overview(a.pk)["attempted"] == 1


@pytest.mark.django_db
def test_overview_counts_and_average(teacher, roster, three_question_payload):
    quiz = create_quiz(three_question_payload, teacher.id)
    a = assign(quiz.pk, RosterScope.of([u.id for u in roster]))
    assert assignment_overview(a.pk) == {"eligible": 3, "attempted": 0, "not_attempted": 3, "average_percentage": None}
    submit(a.pk, roster[0].id, [1, 1, 0])
    submit(a.pk, roster[1].id, [1, None, None])
    assert assignment_overview(a.pk) == {"eligible": 3, "attempted": 2, "not_attempted": 1, "average_percentage": 66.5}


@pytest.mark.django_db
def test_results_for_student_newest_first(teacher, student, quiz_payload):
    quiz = create_quiz(quiz_payload(), teacher.id)
    first = assign(quiz.pk, RosterScope.of([student.id]))
    second = assign(quiz.pk, RosterScope.of([student.id]))
    submit(first.pk, student.id, [0])
    submit(second.pk, student.id, [1])
    got = results_for_student(student.id)
    assert [r.submission.assignment_id for r in got] == [second.pk, first.pk]
    assert [r.percentage for r in got] == [100, 0]


@pytest.mark.django_db
def test_summarize_unknown_assignment():
    with pytest.raises(AssignmentNotFound):
        summarize(404)
