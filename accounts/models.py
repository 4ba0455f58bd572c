"""Accounts models: user profile and roles.

Defines a `UserProfile` associated one-to-one with Django's `User`,
capturing the role (student/teacher) and the name shown in quiz
reports. The profile is created automatically on user creation.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Platform roles used for simple role-based guards."""

    STUDENT = "student", "Student"
    TEACHER = "teacher", "Teacher"


class UserProfile(models.Model):
    """Profile linked to a Django auth user.

    - `role`: soft authorisation gate for API endpoints
    - `full_name`: preferred display name in teacher reports
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT)
    full_name = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover (string repr convenience)
        return f"Profile<{self.user.username}:{self.role}>"

    @property
    def display_name(self) -> str:
        return display_name(self.user)


def display_name(user) -> str:
    """Name used to list and sort students in reports.

    Falls back from the profile's full name to the auth user's first/last
    name and finally the username.
    """
    profile = getattr(user, "profile", None)
    full = (getattr(profile, "full_name", "") or "").strip()
    if full:
        return full
    return (user.get_full_name() or "").strip() or user.username


def role_of(user) -> str | None:
    if not getattr(user, "is_authenticated", False):
        return None
    return getattr(getattr(user, "profile", None), "role", None)
