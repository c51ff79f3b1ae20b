"""API URL router mounted at /api/."""
from django.urls import path

from api.auth_views import (
    CanvasserSendOtpView,
    CanvasserVerifyOtpView,
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    CSRFTokenAPIView,
    LogoutAPIView,
    VerifyAuthView,
)
from api.v1 import account_views, catalog_views, claim_views, incentive_views, reward_views, store_views, support_views

ADMIN = "zopper-administrator/"
REPORT = ADMIN + "spot-incentive-report/"

auth_patterns = [
    path("auth/login/", CookieTokenObtainPairView.as_view(), name="auth-login"),
    path("auth/canvasser/send-otp/", CanvasserSendOtpView.as_view(), name="auth-send-otp"),
    path("auth/canvasser/verify-otp/", CanvasserVerifyOtpView.as_view(), name="auth-verify-otp"),
    path("auth/sec/send-otp/", CanvasserSendOtpView.as_view(), name="auth-sec-send-otp"),
    path("auth/sec/verify-otp/", CanvasserVerifyOtpView.as_view(), name="auth-sec-verify-otp"),
    path("auth/verify/", VerifyAuthView.as_view(), name="auth-verify"),
    path("auth/token/refresh/", CookieTokenRefreshView.as_view(), name="auth-refresh"),
    path("auth/logout/", LogoutAPIView.as_view(), name="auth-logout"),
    path("auth/csrf/", CSRFTokenAPIView.as_view(), name="auth-csrf"),
]

canvasser_patterns = [
    path("canvasser/profile/", account_views.CanvasserProfileView.as_view(), name="canvasser-profile"),
    path("canvasser/profile/update/", account_views.CanvasserProfileUpdateView.as_view(), name="canvasser-profile-update"),
    path("canvasser/kyc/info/", account_views.CanvasserKycInfoView.as_view(), name="canvasser-kyc"),
    path("canvasser/store-change-request/", store_views.CanvasserStoreChangeRequestView.as_view(), name="canvasser-store-change"),
    path("canvasser/incentive/calculate-spot/", catalog_views.CalculateSpotIncentiveView.as_view(), name="calculate-spot"),
    path("canvasser/devices/", catalog_views.DeviceListView.as_view(), name="canvasser-devices"),
    path("canvasser/incentive-form/submit/", incentive_views.SubmitSaleView.as_view(), name="submit-sale"),
    path("canvasser/active-campaigns/", incentive_views.ActiveCampaignsView.as_view(), name="active-campaigns"),
    path("canvasser/spot-incentive/", incentive_views.PassbookView.as_view(), name="passbook"),
    path("canvasser/leaderboard/", incentive_views.CanvasserLeaderboardView.as_view(), name="canvasser-leaderboard"),
    path("canvasser/support-query/", support_views.CanvasserSupportQueryView.as_view(), name="canvasser-support"),
    path("canvasser/support-query/<uuid:pk>/reply/", support_views.CanvasserSupportReplyView.as_view(), name="canvasser-support-reply"),
    path("canvasser/support-query/<uuid:pk>/resolve/", support_views.CanvasserSupportResolveView.as_view(), name="canvasser-support-resolve"),
    # Legacy SEC paths
    path("sec/incentive-form/submit/", incentive_views.SubmitSaleView.as_view(), name="sec-submit-sale"),
    path("sec/spot-incentive/", incentive_views.PassbookView.as_view(), name="sec-passbook"),
    path("sec/plans/fetch/", catalog_views.PlanFetchView.as_view(), name="plans-fetch"),
]

admin_patterns = [
    path(ADMIN + "profile/", account_views.AdminProfileView.as_view(), name="admin-profile"),
    path(ADMIN + "user-validate/users/", account_views.UserValidationListView.as_view(), name="user-validate"),
    path(ADMIN + "user-validate/users/<uuid:pk>/", account_views.UserValidationDetailView.as_view(), name="user-validate-detail"),
    path(REPORT, incentive_views.SpotIncentiveReportView.as_view(), name="spot-incentive-report"),
    path(REPORT + "send-reward/", reward_views.SendRewardsBulkView.as_view(), name="send-rewards-bulk"),
    path(REPORT + "send-reward-otp/", reward_views.SendRewardOtpView.as_view(), name="send-reward-otp"),
    path(REPORT + "send-reward-otp/verify/", reward_views.VerifyRewardOtpView.as_view(), name="verify-reward-otp"),
    path(REPORT + "<uuid:pk>/send-reward/", reward_views.SendRewardView.as_view(), name="send-reward"),
    path(ADMIN + "leaderboard/", incentive_views.LeaderboardView.as_view(), name="admin-leaderboard"),
    path(ADMIN + "process-voucher-excel/", incentive_views.ProcessVoucherExcelView.as_view(), name="process-voucher-excel"),
    path(ADMIN + "support-queries/", support_views.AdminSupportQueryListView.as_view(), name="admin-support-queries"),
    path(ADMIN + "support-queries/<uuid:pk>/", support_views.AdminSupportQueryDetailView.as_view(), name="admin-support-query"),
    path(ADMIN + "support-queries/<uuid:pk>/respond/", support_views.AdminSupportRespondView.as_view(), name="admin-support-respond"),
    path("admin/store-change-requests/", store_views.AdminStoreChangeRequestView.as_view(), name="admin-store-changes"),
]

shared_patterns = [
    path("stores/", store_views.StoreListView.as_view(), name="stores"),
    path("claim-procedure/pdfs/", claim_views.ClaimPDFListView.as_view(), name="claim-pdfs"),
    path("claim-procedure/pdfs/all/", claim_views.ClaimPDFAllView.as_view(), name="claim-pdfs-all"),
    path("claim-procedure/pdfs/upload/", claim_views.ClaimPDFUploadView.as_view(), name="claim-pdf-upload"),
    path("claim-procedure/pdfs/<uuid:pk>/", claim_views.ClaimPDFDetailView.as_view(), name="claim-pdf"),
    path("claim-procedure/pdfs/<uuid:pk>/view/", claim_views.ClaimPDFInlineView.as_view(), name="claim-pdf-view"),
    path("claim-procedure/pdfs/<uuid:pk>/toggle/", claim_views.ClaimPDFToggleView.as_view(), name="claim-pdf-toggle"),
    path("webhooks/benepik/", reward_views.BenepikWebhookView.as_view(), name="benepik-webhook"),
    path("uat/benepik/", reward_views.UatBenepikView.as_view(), name="uat-benepik"),
    path("health/", account_views.HealthView.as_view(), name="health"),
]

urlpatterns = auth_patterns + canvasser_patterns + admin_patterns + shared_patterns
