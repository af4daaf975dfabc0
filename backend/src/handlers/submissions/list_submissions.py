"""
List Submissions Handler.
GET /bar-submissions?userId=...&status=...
"""
from shared.auth import get_user_sub
from shared.errors import ReviewError
from shared.logging import log_event
from shared.models import SubmissionStatus
from shared.store import ReviewStore
from shared.utils import error_response, format_response, get_query_param, server_error_response, to_api

store = ReviewStore()


def handler(event, context):
    log_event(event)

    if not get_user_sub(event):
        return format_response(401, {'error': 'Authentication required'})

    user_id = get_query_param(event, 'userId')
    status = get_query_param(event, 'status')

    if status and status not in SubmissionStatus.ALL:
        return format_response(400, {'error': f"status must be one of {', '.join(SubmissionStatus.ALL)}"})

    try:
        submissions = store.list_submissions(user_id=user_id, status=status)
    except ReviewError as e:
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'listing submissions')

    return format_response(200, {
        'submissions': [to_api(s, id_field='submissionId') for s in submissions]
    })
