"""REST API v1 viewsets and endpoints.

Views translate HTTP into calls on the quiz engine (`quizzes.*`) and
leave the rules to it. Engine errors propagate to
`api.exceptions.quiz_engine_exception_handler`.
"""
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from accounts.models import Role, role_of
from quizzes.assigning import assign, get_assignment, is_eligible, list_for_author, list_for_student, scope_from_payload
from quizzes.exceptions import Forbidden, NotEligible
from quizzes.models import Assignment, Quiz
from quizzes.reporting import assignment_overview, results_for_student, summarize
from quizzes.repository import create_quiz, create_version, delete_quiz, get_quiz, update_quiz
from quizzes.submissions import submit
from quizzes.validation import validate_quiz
from .permissions import IsStudent, IsTeacher
from .serializers import (
    AssignInputSerializer,
    AssignmentSerializer,
    QuizInputSerializer,
    QuizSerializer,
    ResultSerializer,
    StudentSummarySerializer,
    SubmissionInputSerializer,
)


def _own_quiz(request, pk) -> Quiz:
    quiz = get_quiz(int(pk))
    if quiz.author_id != request.user.id:
        raise Forbidden("Only the author can view this quiz.")
    return quiz


class QuizViewSet(viewsets.GenericViewSet):
    """Teacher authoring endpoints; every object is scoped to its author."""

    serializer_class = QuizSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsTeacher]
    filterset_fields = ["course"]
    search_fields = ["title"]
    ordering_fields = ["title", "created_at", "updated_at", "version"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Quiz.objects.none()
        return Quiz.objects.filter(author=self.request.user).prefetch_related("questions__options")

    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(QuizSerializer(page, many=True).data)
        return Response(QuizSerializer(qs, many=True).data)

    def create(self, request):
        payload = QuizInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        quiz = create_quiz(validate_quiz(payload.validated_data), request.user.id)
        return Response(QuizSerializer(get_quiz(quiz.pk)).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(QuizSerializer(_own_quiz(request, pk)).data)

    def update(self, request, pk=None, partial=False):
        payload = QuizInputSerializer(data=request.data, partial=partial)
        payload.is_valid(raise_exception=True)
        quiz = update_quiz(int(pk), payload.validated_data, request.user.id)
        return Response(QuizSerializer(quiz).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        delete_quiz(int(pk), request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"])
    def validate(self, request):
        """Check a quiz payload without storing it."""
        payload = QuizInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        valid = validate_quiz(payload.validated_data)
        return Response({"valid": True, "question_count": len(valid.questions)})

    @action(detail=True, methods=["post"])
    def versions(self, request, pk=None):
        payload = QuizInputSerializer(data=request.data, partial=True)
        payload.is_valid(raise_exception=True)
        quiz = create_version(int(pk), payload.validated_data, request.user.id)
        return Response(QuizSerializer(get_quiz(quiz.pk)).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="assign")
    def assign_quiz(self, request, pk=None):
        payload = AssignInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        assignment = assign(int(pk), scope_from_payload(payload.validated_data), assigned_by=request.user.id)
        return Response(AssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)


class AssignmentViewSet(viewsets.GenericViewSet):
    """Assignments as seen by students (to take) and authors (to report on)."""

    queryset = Assignment.objects.none()
    serializer_class = AssignmentSerializer
    lookup_value_regex = r"\d+"

    def list(self, request):
        role = role_of(request.user)
        if role == Role.TEACHER:
            items = list_for_author(request.user.id)
        elif role == Role.STUDENT:
            items = list_for_student(request.user.id)
        else:
            items = []
        page = self.paginate_queryset(items)
        if page is not None:
            return self.get_paginated_response(AssignmentSerializer(page, many=True).data)
        return Response(AssignmentSerializer(items, many=True).data)

    def retrieve(self, request, pk=None):
        assignment = get_assignment(int(pk))
        if assignment.quiz.author_id != request.user.id and not is_eligible(assignment, request.user.id):
            raise NotEligible()
        return Response(AssignmentSerializer(assignment).data)

    @action(detail=True, methods=["post"], permission_classes=[IsStudent], url_path="submit")
    def submit_answers(self, request, pk=None):
        payload = SubmissionInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = submit(int(pk), request.user.id, payload.validated_data["answers"])
        return Response(ResultSerializer(result).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], permission_classes=[IsTeacher])
    def summary(self, request, pk=None):
        """Per-student report for the quiz author; `?q=` filters by name or e-mail."""
        assignment = get_assignment(int(pk))
        if assignment.quiz.author_id != request.user.id:
            raise Forbidden("Only the quiz author can view results.")
        rows = summarize(assignment.pk, request.query_params.get("q"))
        data = StudentSummarySerializer(rows, many=True).data
        return Response({"count": len(data), "overview": assignment_overview(assignment.pk), "results": data})


@api_view(["GET"])
@permission_classes([IsStudent])
def my_results(request):
    """The requesting student's recorded results, newest first."""
    data = ResultSerializer(results_for_student(request.user.id), many=True).data
    return Response({"count": len(data), "results": data})
