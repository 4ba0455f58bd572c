"""Read-only enrolment lookups used by the quiz engine."""
from __future__ import annotations

from .models import Enrolment


def enrolled_student_ids(course_id: int) -> set[int]:
    """Return the ids of every student currently enrolled in a course."""
    return set(Enrolment.objects.filter(course_id=course_id).values_list("student_id", flat=True))


def enrolled_course_ids(student_id: int) -> set[int]:
    """Return the ids of every course a student is enrolled in."""
    return set(Enrolment.objects.filter(student_id=student_id).values_list("course_id", flat=True))
