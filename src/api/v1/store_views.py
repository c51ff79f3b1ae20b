"""Store listing and store change requests."""
from rest_framework import permissions
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from core.lookups import get_by_pk_or_error
from stores.models import StoreChangeRequest
from stores.services import (
    distinct_cities,
    get_canvasser_for_user,
    request_store_change,
    review_store_change,
    search_stores,
)

from .pagination import StandardResultsSetPagination
from .permissions import IsCanvasser, IsZopperAdmin
from .serializers import StoreChangeRequestSerializer, StoreSerializer


def _int_param(params, name, default):
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        return max(int(raw), 1)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}")


class StoreListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        params = request.query_params
        stores = search_stores(
            search=params.get("search", ""),
            city=params.get("city", ""),
            limit=_int_param(params, "limit", 100),
        )
        return Response(
            {
                "success": True,
                "data": {
                    "stores": StoreSerializer(stores, many=True).data,
                    "cities": distinct_cities(),
                },
            }
        )


class CanvasserStoreChangeRequestView(APIView):
    permission_classes = [IsCanvasser]

    def get(self, request):
        profile = get_canvasser_for_user(request.user)
        requests = (
            profile.store_change_requests.select_related("current_store", "requested_store", "reviewed_by", "canvasser")
            .order_by("-created_at")
        )
        return Response({"success": True, "data": StoreChangeRequestSerializer(requests, many=True).data})

    def post(self, request):
        profile = get_canvasser_for_user(request.user)
        change_request = request_store_change(
            profile,
            request.data.get("storeIds"),
            request.data.get("reason", ""),
        )
        return Response(
            {
                "success": True,
                "message": "Store change request submitted successfully",
                "data": StoreChangeRequestSerializer(change_request).data,
            },
            status=201,
        )


class AdminStoreChangeRequestView(APIView):
    permission_classes = [IsZopperAdmin]

    def get(self, request):
        status_filter = (request.query_params.get("status") or StoreChangeRequest.Status.PENDING).upper()
        queryset = StoreChangeRequest.objects.select_related(
            "canvasser", "current_store", "requested_store", "reviewed_by"
        ).order_by("-created_at")
        if status_filter != "ALL":
            if status_filter not in StoreChangeRequest.Status.values:
                raise ValidationError("Invalid status filter")
            queryset = queryset.filter(status=status_filter)

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(StoreChangeRequestSerializer(page, many=True).data)

    def post(self, request):
        change_request = get_by_pk_or_error(
            StoreChangeRequest.objects.select_related("canvasser", "requested_store"),
            request.data.get("requestId"),
            "Store change request not found",
        )
        change_request = review_store_change(
            change_request,
            action=str(request.data.get("action") or "").lower(),
            reviewer=request.user,
            notes=request.data.get("reviewNotes", ""),
        )
        return Response(
            {
                "success": True,
                "message": f"Store change request {change_request.status.lower()}",
                "data": StoreChangeRequestSerializer(change_request).data,
            }
        )
