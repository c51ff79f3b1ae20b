"""Support query workflow: PENDING -> IN_PROGRESS -> RESOLVED."""
import logging
import re

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from core.exceptions import DomainError

from .models import SupportQuery, SupportQueryMessage

logger = logging.getLogger("spotincentive")

QUERY_NUMBER_RE = re.compile(r"^Q(\d+)$")


def next_query_number() -> str:
    """``Q0001``, ``Q0002``, ... following the highest number in use."""
    highest = 0
    for number in SupportQuery.objects.values_list("query_number", flat=True):
        match = QUERY_NUMBER_RE.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"Q{highest + 1:04d}"


def has_open_query(profile) -> bool:
    return SupportQuery.objects.filter(canvasser=profile, status__in=SupportQuery.OPEN_STATUSES).exists()


def create_query(profile, *, category, description) -> SupportQuery:
    existing = (
        SupportQuery.objects.filter(canvasser=profile, status__in=SupportQuery.OPEN_STATUSES)
        .order_by("-created_at")
        .first()
    )
    if existing is not None:
        raise DomainError(
            "You already have a pending or in-progress query. "
            "Please wait for it to be resolved before submitting a new one.",
            details={"existingQueryNumber": existing.query_number},
        )

    category = (category or "").strip()
    description = (description or "").strip()
    if not category or not description:
        raise DomainError("Category and description are required")
    if category not in SupportQuery.Category.values:
        raise DomainError("Invalid category")
    if len(description) > SupportQuery.MAX_DESCRIPTION_LENGTH:
        raise DomainError("Description must be 500 words or less")

    with transaction.atomic():
        query = SupportQuery.objects.create(
            query_number=next_query_number(),
            canvasser=profile,
            category=category,
            description=description,
        )
        SupportQueryMessage.objects.create(query=query, message=description, author=profile.user)

    logger.info("Support query %s opened by %s", query.query_number, profile.phone)
    return query


def reply_as_canvasser(query: SupportQuery, message, author=None) -> SupportQueryMessage:
    message = (message or "").strip()
    if not message:
        raise DomainError("Message is required")
    if query.status == SupportQuery.Status.RESOLVED:
        raise DomainError("Cannot reply to a resolved query")
    if query.status == SupportQuery.Status.PENDING:
        raise DomainError("Cannot reply until admin responds")
    return SupportQueryMessage.objects.create(query=query, message=message, author=author)


def resolve_query(query: SupportQuery) -> SupportQuery:
    if query.status == SupportQuery.Status.RESOLVED:
        raise DomainError("Query is already resolved")
    if query.status == SupportQuery.Status.PENDING:
        raise DomainError("Cannot resolve a query before admin responds")
    query.status = SupportQuery.Status.RESOLVED
    query.resolved_at = timezone.now()
    query.save(update_fields=["status", "resolved_at", "updated_at"])
    logger.info("Support query %s resolved", query.query_number)
    return query


def respond_as_admin(query: SupportQuery, message, admin) -> SupportQueryMessage:
    message = (message or "").strip()
    if not message:
        raise DomainError("Message is required")
    if query.status == SupportQuery.Status.RESOLVED:
        raise DomainError("Cannot respond to a resolved query")

    with transaction.atomic():
        reply = SupportQueryMessage.objects.create(
            query=query,
            is_from_admin=True,
            admin_name=(admin.full_name or "").strip() or "Admin",
            author=admin,
            message=message,
        )
        if query.status == SupportQuery.Status.PENDING:
            query.status = SupportQuery.Status.IN_PROGRESS
            query.save(update_fields=["status", "updated_at"])
    return reply


def filter_queries(*, status=None, search=""):
    queryset = SupportQuery.objects.select_related("canvasser", "canvasser__store").prefetch_related("messages")
    if status and status != "ALL":
        if status not in SupportQuery.Status.values:
            raise DomainError("Invalid status filter")
        queryset = queryset.filter(status=status)
    search = (search or "").strip()
    if search:
        queryset = queryset.filter(Q(query_number__icontains=search) | Q(description__icontains=search))
    return queryset.order_by("-created_at")


def status_counts() -> dict:
    counts = {row["status"]: row["n"] for row in SupportQuery.objects.values("status").annotate(n=Count("id"))}
    result = {"ALL": sum(counts.values())}
    for status in SupportQuery.Status.values:
        result[status] = counts.get(status, 0)
    return result
