"""
Caller identity from the Cognito authorizer claims of API Gateway events.
"""
from typing import List, Optional


def _claims(event: dict) -> dict:
    try:
        return event['requestContext']['authorizer']['claims'] or {}
    except (KeyError, TypeError):
        return {}


def get_user_sub(event: dict) -> Optional[str]:
    """
    Extract the caller's user id (Cognito sub).

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        User id used as submitter / reviewer id, or None if not authenticated
    """
    return _claims(event).get('sub') or None


def get_user_groups(event: dict) -> List[str]:
    """Cognito groups of the caller (e.g. member, admin)."""
    groups = _claims(event).get('cognito:groups', '')
    if isinstance(groups, str):
        return [g.strip() for g in groups.split(',') if g.strip()]
    return list(groups or [])


def is_admin(event: dict) -> bool:
    """Admins manage reviewer privileges and resolve stuck submissions."""
    return 'admin' in get_user_groups(event)
