import logging
from typing import Optional

logger = logging.getLogger(__name__)


class StorageFailure(Exception):
    """
    The lookup layer could not reach or query the database.

    Distinct from "not found": lookups that simply match nothing return None
    or an empty list. A StorageFailure aborts the whole aggregation and is
    left to the caller (route, script) to report or retry.
    """

    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message)
        self.sqlstate = sqlstate


# SQLSTATE -> message shown to the user
_SQLSTATE_MESSAGES = {
    "23505": "This data already exists in the system.",
    "23503": "The data is still referenced by other records.",
    "23502": "Required data is incomplete.",
    "42501": "You do not have access to perform this operation.",
    "42P01": "A configuration error occurred. Please contact the administrator.",
}

GENERIC_MESSAGE = "Something went wrong. Please try again or contact the administrator."


def describe_storage_failure(exc: Exception) -> str:
    """
    Map a storage error to a user-facing message without leaking table or
    column names. The full error is logged at debug level.
    """
    logger.debug("storage failure: %r", exc)

    sqlstate = getattr(exc, "sqlstate", None)
    message = str(exc)

    if sqlstate in _SQLSTATE_MESSAGES:
        return _SQLSTATE_MESSAGES[sqlstate]
    if "RLS" in message:
        return _SQLSTATE_MESSAGES["42501"]
    if "network" in message or "fetch" in message or "connection" in message:
        return "Connection failed. Check your network connection."
    return GENERIC_MESSAGE
