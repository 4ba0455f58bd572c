"""Courses and enrolments models.

Defines a minimal `Course` owned by a teacher and an `Enrolment` linking
students to courses. Quiz assignments scoped to a course resolve their
students through these enrolments when they are read.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Course(models.Model):
    """A course authored by a teacher user."""

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="owned_courses")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title}"

    def is_owner(self, user) -> bool:
        return bool(user and user.is_authenticated and self.owner_id == user.id)


class Enrolment(models.Model):
    """Link a student to a course.

    Deletion represents teacher removal; this keeps the schema simple for
    SQLite.
    """

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrolments")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrolments")
    completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("course", "student")
        ordering = ["course_id", "student_id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.student_id}->{self.course_id}"
