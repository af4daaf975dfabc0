"""
Set Reviewer Status Handler (admin).
PATCH /admin/reviewers/{userId}
"""
from shared.auth import get_user_sub, is_admin
from shared.errors import ReviewError
from shared.logging import logger, log_event
from shared.models import ReviewerStatus
from shared.store import ReviewStore
from shared.utils import error_response, format_response, get_path_param, parse_body, server_error_response

store = ReviewStore()


def handler(event, context):
    """
    PATCH /admin/reviewers/{userId}
    Body: { "status": "approved" | "rejected" | "pending" }
    """
    log_event(event)

    admin_id = get_user_sub(event)
    if not admin_id:
        return format_response(401, {'error': 'Authentication required'})
    if not is_admin(event):
        return format_response(403, {'error': 'Forbidden'})

    user_id = get_path_param(event, 'userId')
    status = parse_body(event).get('status')

    if not user_id or not status:
        return format_response(400, {'error': 'Missing userId or status'})
    if status not in ReviewerStatus.ALL:
        return format_response(400, {'error': 'Invalid status'})

    try:
        store.set_reviewer_status(user_id, status)
    except ReviewError as e:
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'updating reviewer status')

    logger.info(f"Admin {admin_id} set reviewer status of {user_id} to {status}")

    return format_response(200, {
        'success': True,
        'user_id': user_id,
        'reviewer_status': status
    })
