"""Page-number pagination shared by the list endpoints."""

from __future__ import annotations

from typing import Any, List

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """``?page=N&limit=M`` pagination with total counts in the body."""

    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data: List[Any]) -> Response:
        return Response(
            {
                "count": len(data),
                "total": self.page.paginator.count,
                "total_pages": self.page.paginator.num_pages,
                "current_page": self.page.number,
                "results": data,
            }
        )
