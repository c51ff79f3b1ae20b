"""Celery tasks for accounts."""
import logging

from celery import shared_task
from django.utils import timezone

from .models import OtpCode

logger = logging.getLogger("spotincentive")


@shared_task(name="accounts.tasks.purge_expired_otps")
def purge_expired_otps():
    """Delete OTP codes that expired without being used."""
    deleted, _ = OtpCode.objects.filter(verified=False, expires_at__lt=timezone.now()).delete()
    if deleted:
        logger.info("Purged %d expired OTP codes", deleted)
    return deleted
