"""Support queries for canvassers and administrators."""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.lookups import get_by_pk_or_error
from stores.services import get_canvasser_for_user
from support import services
from support.models import SupportQuery

from .pagination import StandardResultsSetPagination
from .permissions import IsCanvasser, IsZopperAdmin
from .serializers import SupportQueryMessageSerializer, SupportQuerySerializer


def _queries():
    return SupportQuery.objects.select_related("canvasser", "canvasser__store").prefetch_related("messages")


class CanvasserSupportQueryView(APIView):
    permission_classes = [IsCanvasser]

    def get(self, request):
        profile = get_canvasser_for_user(request.user)
        queries = _queries().filter(canvasser=profile).order_by("-created_at")
        data = SupportQuerySerializer(queries, many=True).data
        return Response(
            {
                "success": True,
                "data": {
                    "queries": data,
                    "canCreateNew": not any(q.is_open for q in queries),
                },
            }
        )

    def post(self, request):
        profile = get_canvasser_for_user(request.user)
        query = services.create_query(
            profile,
            category=request.data.get("category"),
            description=request.data.get("description"),
        )
        return Response(
            {"success": True, "data": SupportQuerySerializer(_queries().get(pk=query.pk)).data},
            status=status.HTTP_201_CREATED,
        )


class _CanvasserQueryMixin:
    def get_query(self, request, pk):
        profile = get_canvasser_for_user(request.user)
        return get_by_pk_or_error(_queries().filter(canvasser=profile), pk, "Query not found")


class CanvasserSupportReplyView(_CanvasserQueryMixin, APIView):
    permission_classes = [IsCanvasser]

    def post(self, request, pk):
        query = self.get_query(request, pk)
        message = services.reply_as_canvasser(query, request.data.get("message"), author=request.user)
        return Response(
            {"success": True, "data": SupportQueryMessageSerializer(message).data},
            status=status.HTTP_201_CREATED,
        )


class CanvasserSupportResolveView(_CanvasserQueryMixin, APIView):
    permission_classes = [IsCanvasser]

    def post(self, request, pk):
        query = services.resolve_query(self.get_query(request, pk))
        return Response(
            {
                "success": True,
                "message": "Query marked as resolved",
                "data": SupportQuerySerializer(query).data,
            }
        )


class AdminSupportQueryListView(APIView):
    permission_classes = [IsZopperAdmin]

    def get(self, request):
        queryset = services.filter_queries(
            status=(request.query_params.get("status") or "ALL").upper(),
            search=request.query_params.get("search", ""),
        )
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(
            SupportQuerySerializer(page, many=True).data,
            statusCounts=services.status_counts(),
        )


class AdminSupportQueryDetailView(APIView):
    permission_classes = [IsZopperAdmin]

    def get(self, request, pk):
        query = get_by_pk_or_error(_queries(), pk, "Query not found")
        return Response({"success": True, "data": SupportQuerySerializer(query).data})


class AdminSupportRespondView(APIView):
    permission_classes = [IsZopperAdmin]

    def post(self, request, pk):
        query = get_by_pk_or_error(_queries(), pk, "Query not found")
        message = services.respond_as_admin(query, request.data.get("message"), request.user)
        query.refresh_from_db()
        return Response(
            {
                "success": True,
                "message": "Response sent successfully",
                "data": {
                    "status": query.status,
                    "message": SupportQueryMessageSerializer(message).data,
                },
            },
            status=status.HTTP_201_CREATED,
        )
