"""
Outcome notifications for submitters.
"""
from .errors import NotFoundError
from .logging import logger
from .models import NotificationType, SubmissionStatus


def render_message(name: str, outcome: str, resolved_by: str = None) -> str:
    decided_by = 'a NiteFinder moderator' if resolved_by else 'the community'
    return f'Your submission "{name}" has been {outcome} by {decided_by}.'


def notify(store, submission_id: str, outcome: str) -> bool:
    """
    Record the outcome notification for a submission's owner.

    Returns:
        True if a notification was written
    """
    submission = store.get_submission(submission_id)
    if not submission:
        raise NotFoundError('Submission not found', error='Submission not found')

    kind = NotificationType.for_outcome(outcome)
    written = store.insert_notification(
        submission['userId'],
        submission_id,
        kind,
        render_message(submission.get('name', ''), outcome, submission.get('resolvedBy'))
    )

    if written:
        logger.info(f"Notification {kind} stored for {submission['userId']}")
    return written


def ensure_outcome_notified(store, submission_id: str) -> bool:
    """
    Re-emit the notification for an already decided submission.
    Safe to repeat: the store keeps one notification per submission and kind.

    Returns:
        True if a missing notification was written
    """
    submission = store.get_submission(submission_id)
    if not submission:
        raise NotFoundError('Submission not found', error='Submission not found')

    status = submission.get('status')
    if status not in SubmissionStatus.FINAL:
        return False

    return notify(store, submission_id, status)
