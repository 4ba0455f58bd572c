from django.contrib import admin

from .models import Assignment, Option, Question, Quiz, Result, Submission


class OptionInline(admin.TabularInline):
    model = Option
    extra = 0


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("title", "version", "author", "course", "updated_at")
    list_filter = ("course",)
    search_fields = ("title", "author__username")


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("quiz", "order", "text", "correct_option")
    list_filter = ("quiz",)
    search_fields = ("text",)
    inlines = [OptionInline]


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ("quiz", "scope", "course", "created_at")
    list_filter = ("scope",)
    readonly_fields = ("snapshot",)


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ("assignment", "student", "submitted_at")
    search_fields = ("student__username",)
    readonly_fields = ("answers", "submitted_at")


@admin.register(Result)
class ResultAdmin(admin.ModelAdmin):
    list_display = ("submission", "score", "total", "percentage")

    def has_change_permission(self, request, obj=None):
        # Results are written once at submission time
        return False
