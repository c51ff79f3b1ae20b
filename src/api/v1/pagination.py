"""Pagination utilities for API v1."""

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """Page number pagination with client-controlled ``pageSize``.

    The envelope mirrors the other list endpoints: ``{items, pagination}``.
    """

    page_size = 20
    page_size_query_param = "pageSize"
    max_page_size = 200

    def get_paginated_response(self, data, **extra):
        return Response(
            {
                "success": True,
                "data": {
                    "items": data,
                    **extra,
                    "pagination": {
                        "page": self.page.number,
                        "pageSize": self.get_page_size(self.request),
                        "total": self.page.paginator.count,
                        "totalPages": self.page.paginator.num_pages,
                    },
                },
            }
        )
