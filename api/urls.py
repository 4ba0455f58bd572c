"""API routes for the quiz engine.

Exposes the OpenAPI schema, interactive documentation and the versioned
REST endpoints under /api/v1/.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView


from .views import AssignmentViewSet, QuizViewSet, my_results

router = DefaultRouter()
router.register(r"api/v1/quizzes", QuizViewSet, basename="quizzes")
router.register(r"api/v1/assignments", AssignmentViewSet, basename="assignments")

urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/v1/results/", my_results, name="my-results"),
    path("", include(router.urls)),
]
