"""Listing state transitions.

Every mutation here is a single conditional UPDATE against the row, scoped by
id (and by owner for owner operations), followed by a re-read for the
response. A scoped UPDATE that matches nothing is reported as ListingNotFound,
which is also how a caller learns that a listing is not theirs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.db.models import Case, F, Value, When
from django.utils import timezone

from notifications.models import NotificationKind
from notifications.tasks import notify_listing_status
from reports.models import Report

from . import codes
from .dispatch import dispatch_task
from .exceptions import ListingNotFound, ListingValidationError, translate_persistence_errors
from .models import Listing, ListingStatus
from .policy import Operation, Principal, policy
from .tasks import delete_listing_images
from .validation import clean_listing_fields, clean_status, parse_listing_id


logger = logging.getLogger("clasificados.listings")


@dataclass
class TransitionResult:
    listing: Listing
    message: str


def report_threshold() -> int:
    return int(settings.LISTING_REPORT_THRESHOLD)


def guard_report_threshold(status_expr, *, pending_reports: int = 0):
    """Wrap a status expression so a row at the report threshold stays blocked.

    `pending_reports` is how many reports the same UPDATE adds; the condition
    is evaluated against the stored (pre-update) counter.
    """

    if isinstance(status_expr, str):
        status_expr = Value(status_expr)
    return Case(
        When(reports__gte=report_threshold() - pending_reports, then=Value(ListingStatus.BLOCKED)),
        default=status_expr,
    )


def enforce_report_threshold(listing: Listing) -> Listing:
    if listing.reports >= report_threshold():
        listing.status = ListingStatus.BLOCKED
    return listing


def _reload(pk: int) -> Listing:
    return Listing.objects.with_location().get(pk=pk)


def _apply(queryset, **changes) -> None:
    changes["updated_at"] = timezone.now()
    if not queryset.update(**changes):
        raise ListingNotFound()


def _log_transition(operation: Operation, principal, listing: Listing, from_status=None) -> None:
    logger.info(
        "listing %s",
        operation.value,
        extra={
            "operation": operation.value,
            "listing_id": listing.pk,
            "user_id": getattr(principal, "id", None),
            "role": getattr(principal, "role", None),
            "from_status": from_status,
            "to_status": listing.status,
            "reports": listing.reports,
        },
    )


def _notify(listing: Listing, kind: NotificationKind) -> None:
    dispatch_task(notify_listing_status, listing.pk, kind.value)


@translate_persistence_errors
def create(principal: Principal | None, fields: dict) -> Listing:
    policy.authorize(principal, Operation.CREATE)

    cleaned = clean_listing_fields(fields)
    listing = Listing(
        owner_id=principal.id,
        status=ListingStatus.UNDER_REVIEW,
        reports=0,
        is_deleted=False,
        **cleaned,
    )
    enforce_report_threshold(listing)
    listing.save()

    listing = _reload(listing.pk)
    _log_transition(Operation.CREATE, principal, listing)
    _notify(listing, NotificationKind.LISTING_CREATED)
    return listing


@translate_persistence_errors
def edit(principal: Principal | None, listing_id, fields: dict, removed_images=()) -> Listing:
    policy.authorize(principal, Operation.EDIT)

    pk = parse_listing_id(listing_id)
    cleaned = clean_listing_fields(fields, partial=True)
    _apply(
        Listing.objects.scoped(pk, principal.id),
        status=guard_report_threshold(ListingStatus.UNDER_REVIEW),
        **cleaned,
    )

    listing = _reload(pk)
    _log_transition(Operation.EDIT, principal, listing)

    removed = [ref for ref in (removed_images or []) if ref]
    if removed:
        dispatch_task(delete_listing_images, removed)
    return listing


@translate_persistence_errors
def toggle_status(principal: Principal | None, listing_id) -> TransitionResult:
    policy.authorize(principal, Operation.TOGGLE_STATUS)

    pk = parse_listing_id(listing_id)
    flipped = Case(
        When(status=ListingStatus.PAUSED, then=Value(ListingStatus.PUBLISHED)),
        default=Value(ListingStatus.PAUSED),
    )
    _apply(Listing.objects.scoped(pk, principal.id), status=guard_report_threshold(flipped))

    listing = _reload(pk)
    _log_transition(Operation.TOGGLE_STATUS, principal, listing)
    if listing.status == ListingStatus.BLOCKED:
        return TransitionResult(listing, codes.LISTING_REMAINS_BLOCKED)
    if listing.status == ListingStatus.PUBLISHED:
        return TransitionResult(listing, codes.SUCCESS_LISTING_PUBLISHED)
    return TransitionResult(listing, codes.SUCCESS_LISTING_PAUSED)


@translate_persistence_errors
def renew(principal: Principal | None, listing_id) -> TransitionResult:
    """Extend validity and publish, whatever the current status (blocked included)."""

    policy.authorize(principal, Operation.RENEW)

    pk = parse_listing_id(listing_id)
    valid_until = timezone.now() + timedelta(days=int(settings.LISTING_RENEWAL_DAYS))
    _apply(
        Listing.objects.scoped(pk, principal.id),
        status=ListingStatus.PUBLISHED,
        valid_until=valid_until,
    )

    listing = _reload(pk)
    _log_transition(Operation.RENEW, principal, listing)
    return TransitionResult(listing, codes.SUCCESS_LISTING_RENEWED)


@translate_persistence_errors
def approve(principal: Principal | None, listing_id) -> TransitionResult:
    """Publish a listing regardless of its report count."""

    policy.authorize(principal, Operation.APPROVE)

    pk = parse_listing_id(listing_id)
    previous = Listing.objects.scoped(pk).values_list("status", flat=True).first()
    _apply(Listing.objects.scoped(pk), status=ListingStatus.PUBLISHED)

    listing = _reload(pk)
    _log_transition(Operation.APPROVE, principal, listing, from_status=previous)
    _notify(listing, NotificationKind.LISTING_APPROVED)
    return TransitionResult(listing, codes.SUCCESS_LISTING_APPROVED)


@translate_persistence_errors
def update_status(principal: Principal | None, listing_id, new_status) -> TransitionResult:
    policy.authorize(principal, Operation.UPDATE_STATUS)

    status = clean_status(new_status)
    pk = parse_listing_id(listing_id)
    previous = Listing.objects.scoped(pk).values_list("status", flat=True).first()
    _apply(Listing.objects.scoped(pk), status=status)

    listing = _reload(pk)
    _log_transition(Operation.UPDATE_STATUS, principal, listing, from_status=previous)
    if status == ListingStatus.BLOCKED and previous != ListingStatus.BLOCKED:
        _notify(listing, NotificationKind.LISTING_BLOCKED)
    return TransitionResult(listing, codes.SUCCESS_LISTING_STATUS_UPDATED)


def _mark_deleted(queryset, pk: int) -> Listing:
    _apply(queryset, is_deleted=True)
    return Listing.objects.get(pk=pk)


@translate_persistence_errors
def soft_delete(principal: Principal | None, listing_id) -> TransitionResult:
    policy.authorize(principal, Operation.SOFT_DELETE)

    pk = parse_listing_id(listing_id)
    listing = _mark_deleted(Listing.objects.scoped(pk, principal.id), pk)
    _log_transition(Operation.SOFT_DELETE, principal, listing)
    return TransitionResult(listing, codes.SUCCESS_LISTING_DELETED)


@translate_persistence_errors
def admin_soft_delete(principal: Principal | None, listing_id) -> TransitionResult:
    policy.authorize(principal, Operation.ADMIN_SOFT_DELETE)

    pk = parse_listing_id(listing_id)
    owner_id = Listing.objects.scoped(pk).values_list("owner_id", flat=True).first()
    if owner_id is None:
        raise ListingNotFound()

    # Same primitive as the owner path, scoped to the real owner. Already
    # deleted rows still match so the call is idempotent for admins.
    listing = _mark_deleted(Listing.objects.scoped(pk).filter(owner_id=owner_id), pk)
    _log_transition(Operation.ADMIN_SOFT_DELETE, principal, listing)
    return TransitionResult(listing, codes.SUCCESS_LISTING_DELETED)


@translate_persistence_errors
def restore(principal: Principal | None, listing_id) -> TransitionResult:
    """Undo a soft delete. Same authority as the admin delete."""

    policy.authorize(principal, Operation.ADMIN_SOFT_DELETE)

    pk = parse_listing_id(listing_id)
    _apply(Listing.objects.scoped(pk), is_deleted=False)
    listing = _reload(pk)
    _log_transition(Operation.ADMIN_SOFT_DELETE, principal, listing)
    return TransitionResult(listing, codes.SUCCESS_LISTING_RESTORED)


@translate_persistence_errors
def report(
    listing_id,
    reason,
    additional_info=None,
    contact_info=None,
    principal: Principal | None = None,
) -> Report:
    policy.authorize(principal, Operation.REPORT)

    reason = str(reason or "").strip()
    if not reason:
        raise ListingValidationError(codes.ERROR_REASON_REQUIRED, field="reason")

    pk = parse_listing_id(listing_id)
    previous = Listing.objects.visible().filter(pk=pk).values_list("status", flat=True).first()
    if previous is None:
        raise ListingNotFound()

    entry = Report.objects.create(
        listing_id=pk,
        reporter_id=getattr(principal, "id", None),
        reason=reason[:120],
        additional_info=str(additional_info or "").strip(),
        contact_info=str(contact_info or "").strip()[:255],
    )

    # Counter and threshold move together in one statement, so concurrent
    # reports never lose an increment and the block lands on the crossing one.
    _apply(
        Listing.objects.visible().filter(pk=pk),
        reports=F("reports") + 1,
        status=guard_report_threshold(F("status"), pending_reports=1),
    )

    listing = Listing.objects.get(pk=pk)
    _log_transition(Operation.REPORT, principal, listing, from_status=previous)
    if listing.status == ListingStatus.BLOCKED and previous != ListingStatus.BLOCKED:
        _notify(listing, NotificationKind.LISTING_BLOCKED)
    return entry


@translate_persistence_errors
def expire_overdue(now=None) -> int:
    now = now or timezone.now()
    count = (
        Listing.objects.filter(valid_until__lt=now)
        .exclude(status=ListingStatus.EXPIRED)
        .update(status=ListingStatus.EXPIRED, updated_at=now)
    )
    if count:
        logger.info("listings expired", extra={"operation": "expire", "count": count})
    return count
