import logging

import pytest
from django.contrib.auth.models import User
from django.core.cache import cache
from rest_framework.test import APIClient

from accounts.models import Role
from courses.models import Course, Enrolment


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 400/403/409 paths. Django logs these
    at WARNING via 'django.request'. Lower that logger to ERROR during
    tests to avoid clutter.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    # DRF throttles count requests in the default cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(username, role=Role.STUDENT, full_name="", email=None):
        u = User.objects.create_user(username=username, email=email if email is not None else f"{username}@ex.com")
        prof = u.profile
        prof.role = role
        prof.full_name = full_name
        prof.save(update_fields=["role", "full_name"])
        return u

    return _make


@pytest.fixture
def teacher(make_user):
    return make_user("teacher", role=Role.TEACHER)


@pytest.fixture
def other_teacher(make_user):
    return make_user("teacher2", role=Role.TEACHER)


@pytest.fixture
def student(make_user):
    return make_user("s1", full_name="Sam One")


@pytest.fixture
def course(teacher):
    return Course.objects.create(owner=teacher, title="Python Basics")


@pytest.fixture
def enrol(db):
    def _enrol(course, *students):
        for s in students:
            Enrolment.objects.create(course=course, student=s)

    return _enrol


@pytest.fixture
def quiz_payload():
    """Factory for a valid authoring payload."""

    def _payload(title="Basics", questions=None, course=None):
        if questions is None:
            questions = [{"text": "2+2?", "options": ["3", "4", "5", "6"], "correct_option": 1}]
        return {"title": title, "course": course, "questions": questions}

    return _payload


@pytest.fixture
def three_question_payload(quiz_payload):
    return quiz_payload(
        title="Arithmetic",
        questions=[
            {"text": "1+1?", "options": ["1", "2"], "correct_option": 1},
            {"text": "2*3?", "options": ["5", "6", "7"], "correct_option": 1},
            {"text": "9-4?", "options": ["5", "4", "3", "2"], "correct_option": 0},
        ],
    )


@pytest.fixture
def api_as():
    """APIClient authenticated as the given user (anonymous for None)."""

    def _as(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client

    return _as
