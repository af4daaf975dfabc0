"""
Admin Resolve Submission Handler.
POST /admin/submissions/{submissionId}/resolve

Community voting leaves a submission pending when neither side reaches the
majority threshold at quorum; an admin settles it here. The transition and
notification go through the same conditional path as community decisions.
"""
from shared.aggregation import apply_outcome
from shared.auth import get_user_sub, is_admin
from shared.errors import ConflictError, NotFoundError, ReviewError
from shared.logging import logger, log_event
from shared.models import SubmissionStatus
from shared.store import ReviewStore
from shared.utils import error_response, format_response, get_path_param, parse_body, server_error_response

store = ReviewStore()


def handler(event, context):
    """
    POST /admin/submissions/{submissionId}/resolve
    Body: { "status": "approved" | "rejected" }
    """
    log_event(event)

    admin_id = get_user_sub(event)
    if not admin_id:
        return format_response(401, {'error': 'Authentication required'})
    if not is_admin(event):
        return format_response(403, {'error': 'Forbidden'})

    submission_id = get_path_param(event, 'submissionId')
    status = parse_body(event).get('status')

    if not submission_id:
        return format_response(400, {'error': 'Missing submissionId'})
    if status not in SubmissionStatus.FINAL:
        return format_response(400, {'error': 'Invalid status. Must be approved or rejected'})

    try:
        resolve(submission_id, status, admin_id)
    except ReviewError as e:
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'resolving submission')

    logger.info(f"Admin {admin_id} resolved submission {submission_id} as {status}")

    return format_response(200, {
        'submission_id': submission_id,
        'status': status,
        'resolved': True
    })


def resolve(submission_id: str, status: str, admin_id: str) -> None:
    submission = store.get_submission(submission_id)
    if not submission:
        raise NotFoundError('Submission not found', error='Submission not found')

    if not apply_outcome(store, submission_id, status, resolved_by=admin_id):
        raise ConflictError('This submission has already been processed.', error='Submission not reviewable')
