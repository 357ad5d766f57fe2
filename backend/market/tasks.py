import logging

from celery import shared_task

from . import storage


logger = logging.getLogger("clasificados.tasks")


@shared_task(name="market.tasks.expire_listings")
def expire_listings():
    from .lifecycle import expire_overdue

    count = expire_overdue()
    logger.info("expiry sweep finished", extra={"task": "expire_listings", "count": count})
    return count


@shared_task(name="market.tasks.delete_listing_images")
def delete_listing_images(references):
    count = storage.delete(references)
    logger.info("listing images deleted", extra={"task": "delete_listing_images", "count": count})
    return count
