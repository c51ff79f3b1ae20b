"""Celery tasks for reward payouts."""
import logging

from celery import shared_task

from core.exceptions import DomainError

from . import services

logger = logging.getLogger("spotincentive")


@shared_task(
    bind=True,
    name="rewards.tasks.send_reward_task",
    max_retries=3,
    default_retry_delay=30,
)
def send_reward_task(self, report_id):
    """Send one reward in the background, retrying while Benepik is down."""
    try:
        return services.send_reward(report_id)
    except DomainError as exc:
        if exc.status_code == 502:
            logger.warning("Benepik unavailable for report %s, retrying", report_id)
            raise self.retry(exc=exc)
        logger.error("Reward for report %s not sent: %s", report_id, exc.message)
        return {"success": False, "reportId": report_id, "error": exc.message}


@shared_task(name="rewards.tasks.reconcile_pending_balance")
def reconcile_pending_balance():
    """Daily scan for payouts parked on insufficient balance."""
    return services.flag_pending_balance()
