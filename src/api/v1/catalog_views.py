"""Incentive calculator, device list and plan lookup."""
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.services import calculate_spot_incentive, device_categories, plans_for_price
from core.exceptions import NotFoundError

from .permissions import IsCanvasser
from .serializers import PlanSerializer


class CalculateSpotIncentiveView(APIView):
    permission_classes = [IsCanvasser]

    def post(self, request):
        data = request.data
        try:
            result = calculate_spot_incentive(
                data.get("category"),
                data.get("invoicePrice"),
                data.get("tenure"),
            )
        except NotFoundError as exc:
            return Response({"error": exc.message, "incentive": 0}, status=status.HTTP_404_NOT_FOUND)
        return Response({"success": True, **result})


class DeviceListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "data": device_categories()})


class PlanFetchView(APIView):
    """Plans whose appliance price range covers the given price.

    Accepts ``{category, price}`` as a JSON body or as query parameters.
    """

    permission_classes = [permissions.IsAuthenticated]

    def _respond(self, params):
        plans = plans_for_price(params.get("category"), params.get("price"))
        return Response({"success": True, "plans": PlanSerializer(plans, many=True).data})

    def get(self, request):
        return self._respond(request.query_params)

    def post(self, request):
        return self._respond(request.data)
