"""Custom permissions for REST API v1."""
from __future__ import annotations

from rest_framework.permissions import BasePermission

from accounts.models import Role, role_of


class IsTeacher(BasePermission):
    def has_permission(self, request, view):
        return role_of(request.user) == Role.TEACHER


class IsStudent(BasePermission):
    def has_permission(self, request, view):
        return role_of(request.user) == Role.STUDENT
