"""
List Notifications Handler.
GET /notifications

Returns the caller's submission outcome notifications, newest first.
"""
from shared.auth import get_user_sub
from shared.errors import ReviewError
from shared.logging import log_event
from shared.store import ReviewStore
from shared.utils import error_response, format_response, server_error_response, to_api

store = ReviewStore()


def handler(event, context):
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'error': 'Authentication required'})

    try:
        notifications = store.list_notifications(user_id)
    except ReviewError as e:
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'listing notifications')

    return format_response(200, {
        'notifications': [to_api(n, id_field='notificationId') for n in notifications],
        'unread': len([n for n in notifications if not n.get('read')])
    })
