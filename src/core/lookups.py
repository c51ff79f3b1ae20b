"""Primary-key lookups that tolerate malformed ids from request payloads."""
from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from .exceptions import NotFoundError


def find_by_pk(source, pk):
    """Return the row with primary key *pk* or ``None``.

    *source* is a model class or a queryset. Ids that cannot be coerced to
    the primary key type (e.g. a non-UUID string) are treated as missing.
    """
    queryset = source if isinstance(source, QuerySet) else source._default_manager.all()
    if pk in (None, ""):
        return None
    try:
        return queryset.filter(pk=pk).first()
    except (ValidationError, ValueError, TypeError):
        return None


def get_by_pk_or_error(source, pk, message):
    obj = find_by_pk(source, pk)
    if obj is None:
        raise NotFoundError(message)
    return obj
