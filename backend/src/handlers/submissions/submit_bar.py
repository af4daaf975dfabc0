"""
Submit Bar Handler.
POST /bar-submissions
"""
from shared.auth import get_user_sub
from shared.errors import ReviewError, StoreError
from shared.logging import logger, log_event
from shared.store import ReviewStore
from shared.submissions import create_submission
from shared.utils import error_response, format_response, parse_body, server_error_response, to_api

store = ReviewStore()


def handler(event, context):
    """
    Handler for submitting a new venue for community review.
    POST /bar-submissions
    Body: { "name": "...", "neighbourhood": "...", "address": "...", ...venue attributes }
    """
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'error': 'Authentication required'})

    try:
        submission = create_submission(store, user_id, parse_body(event))
    except StoreError as e:
        return server_error_response(e, 'creating bar submission')
    except ReviewError as e:
        logger.info(f"Bar submission by {user_id} refused: {e.error}")
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'creating bar submission')

    return format_response(200, {
        'success': True,
        'message': "Bar submission received! We'll review it and add it to the app if approved.",
        'submission': to_api(submission, id_field='submissionId')
    })
