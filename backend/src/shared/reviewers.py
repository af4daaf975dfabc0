"""
Reviewer authorization.
"""
from .logging import logger
from .models import ReviewerStatus


def can_review(store, user_id: str) -> bool:
    """
    Check whether a user holds reviewer privileges.

    Only an explicit 'approved' reviewer status grants access; a missing user
    record is treated as unauthorized.
    """
    if not user_id:
        return False

    status = store.get_user_reviewer_status(user_id)
    if status is None:
        logger.info(f"No reviewer profile for {user_id}")
        return False

    return status == ReviewerStatus.APPROVED
