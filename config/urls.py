"""URL routing for the quiz engine.

Admin plus the REST API and its schema/docs. There are no server-rendered
pages; rendering is left to the client.
"""
from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("api.urls")),
]
