"""Reward payouts, the Benepik webhook and the UAT proxy."""
import json
import logging

from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import DomainError
from rewards import services
from rewards.benepik import BenepikClient, BenepikUnavailable
from rewards.uat import verify_uat_token

from .permissions import DenyUatUsers, IsZopperAdmin

logger = logging.getLogger("spotincentive")

SIGNATURE_HEADER = "X-Benepik-Signature"


class SendRewardView(APIView):
    permission_classes = [IsZopperAdmin, DenyUatUsers]

    def post(self, request, pk):
        result = services.send_reward(pk, actor=request.user)
        return Response(result)


class SendRewardsBulkView(APIView):
    permission_classes = [IsZopperAdmin, DenyUatUsers]

    def post(self, request):
        services.require_reward_otp(request.user)
        result = services.send_rewards_bulk(request.data.get("reportIds"), actor=request.user)
        return Response(
            {
                "success": result["failed"] == 0,
                "message": f"Rewards sent for {result['sent']} report(s)",
                "data": result,
            }
        )


class SendRewardOtpView(APIView):
    permission_classes = [IsZopperAdmin, DenyUatUsers]

    def post(self, request):
        return Response(services.send_reward_otp(request.user))


class VerifyRewardOtpView(APIView):
    permission_classes = [IsZopperAdmin, DenyUatUsers]

    def post(self, request):
        return Response(services.verify_reward_otp(request.user, request.data.get("otp")))


class BenepikWebhookView(APIView):
    """Status callbacks from Benepik, authenticated by an HMAC of the raw body."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        raw_body = request.body
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Benepik webhook without signature header")
            return Response({"error": "Missing signature header"}, status=status.HTTP_401_UNAUTHORIZED)

        secret = getattr(settings, "BENEPIK_WEBHOOK_SECRET", "")
        if not secret:
            logger.error("BENEPIK_WEBHOOK_SECRET is not configured")
            return Response(
                {"error": "Webhook secret not configured"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if not services.verify_webhook_signature(raw_body, signature, secret):
            logger.warning("Benepik webhook with invalid signature")
            return Response({"error": "Invalid signature"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            payload = json.loads(raw_body or b"{}")
        except ValueError:
            raise DomainError("Request body must be valid JSON")
        return Response(services.process_webhook(payload))


class UatBenepikView(APIView):
    """Forward a raw reward payload to Benepik for partner UAT runs."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        verify_uat_token(request.headers.get("Authorization"))

        payload = request.data
        if not isinstance(payload, dict) or not payload:
            return Response(
                {"success": False, "error": "Payload is missing or empty"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            http_status, body = BenepikClient().send_rewards(dict(payload))
        except BenepikUnavailable as exc:
            return Response(
                {"success": False, "error": "Benepik service unavailable", "details": str(exc)},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        if 200 <= http_status < 300:
            return Response({"success": True, "data": body})
        return Response(body, status=http_status)
