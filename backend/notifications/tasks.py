import logging

from celery import shared_task

from .models import Notification, NotificationKind


logger = logging.getLogger("clasificados.tasks")

_TITLES = {
    NotificationKind.LISTING_CREATED: "Your listing was received",
    NotificationKind.LISTING_APPROVED: "Your listing was approved",
    NotificationKind.LISTING_BLOCKED: "Your listing was blocked",
}

_BODIES = {
    NotificationKind.LISTING_CREATED: "“{title}” is under review and will be published once approved.",
    NotificationKind.LISTING_APPROVED: "“{title}” is now published.",
    NotificationKind.LISTING_BLOCKED: "“{title}” was blocked and is no longer visible to buyers.",
}


@shared_task(name="notifications.tasks.notify_listing_status")
def notify_listing_status(listing_id, kind):
    from market.models import Listing

    listing = Listing.objects.filter(pk=listing_id).only("id", "owner_id", "title", "status").first()
    if listing is None:
        logger.warning("notification skipped, listing gone", extra={"listing_id": listing_id, "task": kind})
        return None

    kind = NotificationKind(kind)
    notification = Notification.objects.create(
        user_id=listing.owner_id,
        kind=kind,
        title=_TITLES[kind],
        body=_BODIES[kind].format(title=listing.title),
        payload={"listing_id": listing.id, "status": listing.status},
    )
    return notification.id
