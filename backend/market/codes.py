"""Stable, machine-readable reason and message keys returned to clients."""

SUCCESS_LISTING_PUBLISHED = "SUCCESS_LISTING_PUBLISHED"
SUCCESS_LISTING_PAUSED = "SUCCESS_LISTING_PAUSED"
SUCCESS_LISTING_RENEWED = "SUCCESS_LISTING_RENEWED"
SUCCESS_LISTING_APPROVED = "SUCCESS_LISTING_APPROVED"
SUCCESS_LISTING_STATUS_UPDATED = "SUCCESS_LISTING_STATUS_UPDATED"
SUCCESS_LISTING_DELETED = "SUCCESS_LISTING_DELETED"
SUCCESS_LISTING_RESTORED = "SUCCESS_LISTING_RESTORED"
LISTING_REMAINS_BLOCKED = "LISTING_REMAINS_BLOCKED"
SUCCESS_REPORT_CREATED = "SUCCESS_REPORT_CREATED"

ERROR_TITLE_REQUIRED = "ERROR_TITLE_REQUIRED"
ERROR_TITLE_TOO_LONG = "ERROR_TITLE_TOO_LONG"
ERROR_AGE_REQUIRED = "ERROR_AGE_REQUIRED"
ERROR_LOCATION_REQUIRED = "ERROR_LOCATION_REQUIRED"
ERROR_LOCATION_NOT_FOUND = "ERROR_LOCATION_NOT_FOUND"
ERROR_PRICE_REQUIRED = "ERROR_PRICE_REQUIRED"
ERROR_PRICE_MUST_BE_NUMBER = "ERROR_PRICE_MUST_BE_NUMBER"
ERROR_PRICE_NEGATIVE = "ERROR_PRICE_NEGATIVE"
ERROR_PHONE_REQUIRED = "ERROR_PHONE_REQUIRED"
ERROR_PHONE_MUST_BE_NUMBER = "ERROR_PHONE_MUST_BE_NUMBER"
ERROR_USE_WHATSAPP_BOOLEAN = "ERROR_USE_WHATSAPP_BOOLEAN"
ERROR_PHOTOS_INVALID = "ERROR_PHOTOS_INVALID"
ERROR_TOO_MANY_FILES = "ERROR_TOO_MANY_FILES"
ERROR_FILE_TOO_LARGE = "ERROR_FILE_TOO_LARGE"
ERROR_INVALID_FILE_TYPE = "ERROR_INVALID_FILE_TYPE"
ERROR_NO_FILES_UPLOADED = "ERROR_NO_FILES_UPLOADED"
ERROR_INVALID_STATUS = "ERROR_INVALID_STATUS"
ERROR_REASON_REQUIRED = "ERROR_REASON_REQUIRED"

ERROR_LISTING_NOT_FOUND = "ERROR_LISTING_NOT_FOUND"
ERROR_ACCESS_DENIED = "ERROR_ACCESS_DENIED"
ERROR_UNAUTHORIZED = "ERROR_UNAUTHORIZED"
ERROR_GENERIC = "ERROR_GENERIC"
