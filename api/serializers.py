"""Serializers for REST API v1.

Input serializers only check the payload's shape; the quiz rules
themselves are enforced by `quizzes.validation` so every client gets the
same error codes. Students never see correct answers.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from quizzes.models import Assignment, Question, Quiz, Result
from quizzes.repository import is_locked

User = get_user_model()


class QuestionInputSerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)
    options = serializers.ListField(child=serializers.CharField(allow_blank=True, trim_whitespace=False), allow_empty=True)
    correct_option = serializers.IntegerField(allow_null=True, required=False, default=None)


class QuizInputSerializer(serializers.Serializer):
    title = serializers.CharField(allow_blank=True, trim_whitespace=False)
    course = serializers.IntegerField(allow_null=True, required=False, default=None)
    questions = QuestionInputSerializer(many=True, allow_empty=True)


class QuestionSerializer(serializers.ModelSerializer):
    options = serializers.SerializerMethodField()

    class Meta:
        model = Question
        fields = ("text", "options", "correct_option")

    def get_options(self, obj) -> list[str]:
        return [o.text for o in obj.options.all()]


class QuizSerializer(serializers.ModelSerializer):
    questions = QuestionSerializer(many=True, read_only=True)
    locked = serializers.SerializerMethodField()

    class Meta:
        model = Quiz
        fields = ("id", "title", "course", "author", "version", "previous_version", "locked", "questions", "created_at", "updated_at")
        read_only_fields = fields

    def get_locked(self, obj) -> bool:
        return is_locked(obj)


class AssignInputSerializer(serializers.Serializer):
    course = serializers.IntegerField(required=False, allow_null=True, default=None)
    students = serializers.ListField(child=serializers.IntegerField(), required=False, allow_empty=True)

    def validate(self, attrs):
        has_course = attrs.get("course") is not None
        has_students = "students" in attrs
        if has_course == has_students:
            raise serializers.ValidationError("Provide either a course or a list of students.")
        return attrs


class AssignmentSerializer(serializers.ModelSerializer):
    title = serializers.CharField(read_only=True)
    question_count = serializers.IntegerField(read_only=True)
    students = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    questions = serializers.SerializerMethodField()

    class Meta:
        model = Assignment
        fields = ("id", "quiz", "title", "scope", "course", "students", "question_count", "questions", "created_at")
        read_only_fields = fields

    def get_questions(self, obj) -> list[dict]:
        # Answer key stays server-side
        return [{"text": q["text"], "options": q["options"]} for q in obj.snapshot_questions]


class SubmissionInputSerializer(serializers.Serializer):
    answers = serializers.ListField(child=serializers.IntegerField(allow_null=True), allow_empty=True)


class ResultSerializer(serializers.ModelSerializer):
    submission = serializers.IntegerField(source="submission_id", read_only=True)
    assignment = serializers.IntegerField(source="submission.assignment_id", read_only=True)
    answers = serializers.ListField(source="submission.answers", read_only=True)
    submitted_at = serializers.DateTimeField(source="submission.submitted_at", read_only=True)

    class Meta:
        model = Result
        fields = ("submission", "assignment", "score", "total", "percentage", "answers", "submitted_at")
        read_only_fields = fields


class StudentSummarySerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.CharField()
    status = serializers.CharField()
    score = serializers.IntegerField(allow_null=True)
    total = serializers.IntegerField(allow_null=True)
    percentage = serializers.IntegerField(allow_null=True)
    submitted_at = serializers.DateTimeField(allow_null=True)
