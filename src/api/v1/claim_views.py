"""Claim procedure PDF endpoints."""
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from claims import services
from claims.models import ClaimProcedurePDF
from core.lookups import get_by_pk_or_error

from .permissions import IsZopperAdmin
from .serializers import ClaimProcedurePDFSerializer


class ClaimPDFListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        pdfs = services.metadata_queryset().filter(is_active=True)
        return Response({"success": True, "data": ClaimProcedurePDFSerializer(pdfs, many=True).data})


class ClaimPDFAllView(APIView):
    permission_classes = [IsZopperAdmin]

    def get(self, request):
        pdfs = services.metadata_queryset()
        return Response({"success": True, "data": ClaimProcedurePDFSerializer(pdfs, many=True).data})


class ClaimPDFUploadView(APIView):
    permission_classes = [IsZopperAdmin]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        pdf = services.replace_pdf_from_upload(
            request.FILES.get("file"),
            title=request.data.get("title", ""),
            description=request.data.get("description", ""),
            category=request.data.get("category", ""),
            uploaded_by=request.user,
        )
        return Response(
            {
                "success": True,
                "message": "PDF uploaded successfully",
                "data": ClaimProcedurePDFSerializer(pdf).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ClaimPDFDetailView(APIView):
    """GET downloads the file; DELETE removes it (admin only)."""

    def get_permissions(self):
        if self.request.method == "DELETE":
            return [IsZopperAdmin()]
        return [permissions.IsAuthenticated()]

    def get(self, request, pk):
        pdf = get_by_pk_or_error(ClaimProcedurePDF, pk, "PDF not found")
        return services.pdf_response(pdf)

    def delete(self, request, pk):
        pdf = get_by_pk_or_error(services.metadata_queryset(), pk, "PDF not found")
        pdf.delete()
        return Response({"success": True, "message": "PDF deleted successfully"})


class ClaimPDFInlineView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        pdf = get_by_pk_or_error(ClaimProcedurePDF, pk, "PDF not found")
        return services.pdf_response(pdf, inline=True)


class ClaimPDFToggleView(APIView):
    permission_classes = [IsZopperAdmin]

    def patch(self, request, pk):
        pdf = get_by_pk_or_error(services.metadata_queryset(), pk, "PDF not found")
        pdf = services.toggle_active(pdf)
        return Response({"success": True, "data": ClaimProcedurePDFSerializer(pdf).data})
