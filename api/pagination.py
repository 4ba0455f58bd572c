from __future__ import annotations

from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """Page quiz and assignment listings.

    Clients may ask for `?page_size=N`; requests above `max_page_size` are
    clamped so a teacher with many quizzes cannot pull them all at once.
    """

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
