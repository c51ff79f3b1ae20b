"""Sale submission, passbook, admin report, leaderboard and voucher import."""
import math

from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from core.export import rows_to_xlsx_response
from incentives import reports
from incentives.services import active_campaigns_for_store, submit_sale
from incentives.vouchers import process_voucher_workbook
from stores.services import get_canvasser_for_user

from .permissions import DenyUatUsers, IsCanvasser, IsZopperAdmin
from .serializers import CampaignSerializer


def _positive_int(params, name, default, maximum=None):
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}")
    if value < 1:
        raise ValidationError(f"Invalid {name}")
    return min(value, maximum) if maximum else value


class SubmitSaleView(APIView):
    permission_classes = [IsCanvasser]

    def post(self, request):
        profile = get_canvasser_for_user(request.user)
        report = submit_sale(profile, request.data)
        return Response(
            {
                "success": True,
                "message": "Sales report submitted successfully",
                "salesReport": reports.report_row(report),
            },
            status=status.HTTP_201_CREATED,
        )


class ActiveCampaignsView(APIView):
    permission_classes = [IsCanvasser]

    def get(self, request):
        profile = get_canvasser_for_user(request.user)
        if profile.store is None:
            return Response({"success": True, "data": {"campaigns": [], "store": None}})
        campaigns = active_campaigns_for_store(profile.store)
        return Response(
            {
                "success": True,
                "data": {
                    "campaigns": CampaignSerializer(campaigns, many=True).data,
                    "store": {"id": str(profile.store.pk), "name": profile.store.name},
                },
            }
        )


class PassbookView(APIView):
    permission_classes = [IsCanvasser]

    def get(self, request):
        profile = get_canvasser_for_user(request.user)
        return Response({"success": True, "data": reports.build_passbook(profile)})


class SpotIncentiveReportView(APIView):
    """Admin report of every sale, with filters, paging and Excel export."""

    permission_classes = [IsZopperAdmin]

    def get(self, request):
        params = request.query_params
        queryset = reports.filter_reports(params)

        if (params.get("format") or "").lower() == "xlsx":
            stamp = timezone.localdate().isoformat()
            return rows_to_xlsx_response(
                reports.EXPORT_HEADERS,
                reports.export_rows(queryset),
                f"spot-incentive-report-{stamp}",
                sheet_title="Spot Incentive Report",
            )

        page = _positive_int(params, "page", 1)
        limit = _positive_int(params, "limit", 50, maximum=500)
        total = queryset.count()
        total_pages = max(math.ceil(total / limit), 1)
        offset = (page - 1) * limit
        rows = [reports.report_row(report) for report in queryset[offset:offset + limit]]

        return Response(
            {
                "success": True,
                "data": {
                    "reports": rows,
                    "pagination": {
                        "page": page,
                        "limit": limit,
                        "total": total,
                        "totalPages": total_pages,
                        "hasNext": page < total_pages,
                        "hasPrev": page > 1,
                    },
                    "summary": reports.report_summary(queryset),
                    "filters": reports.report_filter_options(),
                },
            }
        )


class LeaderboardView(APIView):
    """Shared by the canvasser and admin leaderboards."""

    permission_classes = [IsZopperAdmin]

    def get(self, request):
        params = request.query_params
        period = params.get("period") or "month"
        if period not in ("week", "month", "all"):
            raise ValidationError("Invalid period. Use week, month, or all.")
        data = reports.build_leaderboard(
            period=period,
            month=params.get("month"),
            year=params.get("year"),
            limit=_positive_int(params, "limit", 10, maximum=100),
        )
        return Response({"success": True, "data": data})


class CanvasserLeaderboardView(LeaderboardView):
    permission_classes = [IsCanvasser]


class ProcessVoucherExcelView(APIView):
    permission_classes = [IsZopperAdmin, DenyUatUsers]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            raise ValidationError("No file uploaded")
        result = process_voucher_workbook(upload)
        details = result.pop("details")
        return Response(
            {
                "success": True,
                "message": f"Processed {result['total']} row(s)",
                "summary": result,
                "details": details,
            }
        )
