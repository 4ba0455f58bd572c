"""Teacher-facing result reports.

`summarize` lists every student an assignment reaches, attempted or not,
plus anyone who submitted and has since left its scope, sorted by display
name. Filtering by name or e-mail happens on the loaded rows before the
summaries are built.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from django.contrib.auth import get_user_model
from django.db import models

from accounts.models import display_name
from .assigning import eligible_student_ids, get_assignment
from .models import Result


class AttemptStatus(models.TextChoices):
    ATTEMPTED = "attempted", "Attempted"
    NOT_ATTEMPTED = "not_attempted", "Not attempted"


@dataclass(frozen=True)
class StudentSummary:
    student_id: int
    name: str
    email: str
    status: str
    score: int | None = None
    total: int | None = None
    percentage: int | None = None
    submitted_at: datetime | None = None


def _matches(query: str, name: str, email: str) -> bool:
    q = query.casefold()
    return q in name.casefold() or q in email.casefold()


def summarize(assignment_id: int, query: str | None = None) -> list[StudentSummary]:
    assignment = get_assignment(assignment_id)
    results = {
        r.submission.student_id: r
        for r in Result.objects.filter(submission__assignment=assignment).select_related("submission")
    }
    # Recorded results stay visible after a student leaves the scope
    student_ids = eligible_student_ids(assignment) | set(results)
    users = get_user_model().objects.filter(pk__in=student_ids).select_related("profile")
    query = (query or "").strip()
    rows: list[StudentSummary] = []
    for user in users:
        name = display_name(user)
        email = user.email or ""
        if query and not _matches(query, name, email):
            continue
        result = results.get(user.pk)
        if result is None:
            rows.append(StudentSummary(student_id=user.pk, name=name, email=email, status=AttemptStatus.NOT_ATTEMPTED))
        else:
            rows.append(
                StudentSummary(
                    student_id=user.pk,
                    name=name,
                    email=email,
                    status=AttemptStatus.ATTEMPTED,
                    score=result.score,
                    total=result.total,
                    percentage=result.percentage,
                    submitted_at=result.submission.submitted_at,
                )
            )
    rows.sort(key=lambda row: (row.name.casefold(), row.student_id))
    return rows


def assignment_overview(assignment_id: int) -> dict[str, object]:
    """Counts and average percentage across the students in `summarize`."""
    rows = summarize(assignment_id)
    attempted = [r for r in rows if r.status == AttemptStatus.ATTEMPTED]
    average = round(sum(r.percentage for r in attempted) / len(attempted), 2) if attempted else None
    return {
        "eligible": len(rows),
        "attempted": len(attempted),
        "not_attempted": len(rows) - len(attempted),
        "average_percentage": average,
    }


def results_for_student(student_id: int) -> list[Result]:
    """A student's recorded results, newest first."""
    return list(
        Result.objects.filter(submission__student_id=student_id)
        .select_related("submission", "submission__assignment")
        .order_by("-submission__submitted_at", "-id")
    )
