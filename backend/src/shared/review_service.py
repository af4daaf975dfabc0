"""
Submission review workflow.

submit_review checks every precondition before writing anything:
1. input shape (decision, confidence, flags, notes)
2. reviewer authorization
3. no earlier review by this reviewer for this submission
4. submission exists and is still pending
5. reviewer is not the submitter

Once the review is stored the request succeeds. The trailing steps
(reputation credit, aggregation, notification) commit independently:
- a failed reputation credit is logged and dropped, since replaying an
  increment is not idempotent
- a failed aggregation or notification is queued for a follow-up run,
  both being safe to repeat
"""
from typing import Any, Dict, Optional

from .aggregation import aggregate
from .config import config
from .errors import AuthorizationError, ConflictError, NotFoundError, StoreError, ValidationError
from .gamification import POINTS_PER_REVIEW, award_review_credit
from .logging import logger
from .models import ReviewDecision, SubmissionStatus
from .notifications import ensure_outcome_notified
from .reviewers import can_review
from .sqs import schedule_review_followup

ACCURACY_FLAGS = ('name_accurate', 'location_accurate', 'details_accurate', 'features_accurate')


def validate_review_input(
    submission_id: Any,
    decision: Any,
    accuracy_flags: Optional[Dict[str, Any]],
    notes: Any,
    confidence: Any
) -> Dict[str, Any]:
    """
    Validate the review form and return the cleaned values.

    Raises:
        ValidationError: listing every invalid field
    """
    errors = []

    if not isinstance(submission_id, str) or not submission_id.strip():
        errors.append({'field': 'submission_id', 'message': 'submission_id is required'})

    if decision not in ReviewDecision.ALL:
        errors.append({
            'field': 'decision',
            'message': f"decision must be one of {', '.join(ReviewDecision.ALL)}"
        })

    # bool is an int subclass; a checkbox value is not a confidence level
    if isinstance(confidence, bool) or not isinstance(confidence, int):
        errors.append({'field': 'confidence_level', 'message': 'confidence_level must be an integer'})
    elif not config.CONFIDENCE_MIN <= confidence <= config.CONFIDENCE_MAX:
        errors.append({
            'field': 'confidence_level',
            'message': f'confidence_level must be between {config.CONFIDENCE_MIN} and {config.CONFIDENCE_MAX}'
        })

    flags = {}
    for flag in ACCURACY_FLAGS:
        value = (accuracy_flags or {}).get(flag, False)
        if not isinstance(value, bool):
            errors.append({'field': flag, 'message': f'{flag} must be a boolean'})
        flags[flag] = value

    if notes is None:
        notes = ''
    if not isinstance(notes, str):
        errors.append({'field': 'review_notes', 'message': 'review_notes must be a string'})
    elif len(notes) > config.REVIEW_NOTES_MAX_LENGTH:
        errors.append({
            'field': 'review_notes',
            'message': f'review_notes must be at most {config.REVIEW_NOTES_MAX_LENGTH} characters'
        })

    if errors:
        raise ValidationError('Invalid review', details=errors)

    return {
        'decision': decision,
        'confidence': confidence,
        'flags': flags,
        'notes': notes.strip()
    }


def check_reviewable(store, submission_id: str, reviewer_id: str) -> Dict[str, Any]:
    """
    Enforce the state preconditions of a review, in order.

    Returns:
        The target submission

    Raises:
        AuthorizationError, ConflictError, NotFoundError
    """
    if not can_review(store, reviewer_id):
        raise AuthorizationError(
            'You need reviewer status to review submissions. Contact an admin to request access.'
        )

    if store.find_review(submission_id, reviewer_id):
        raise ConflictError('You have already reviewed this submission.', error='Already reviewed')

    submission = store.get_submission(submission_id)
    if not submission:
        raise NotFoundError('Submission not found', error='Submission not found')

    if submission.get('status') != SubmissionStatus.PENDING:
        raise ConflictError('This submission has already been processed.', error='Submission not reviewable')

    if submission.get('userId') == reviewer_id:
        raise ConflictError('You cannot review your own submission.', error='Cannot review own submission')

    return submission


def submit_review(
    store,
    submission_id: str,
    reviewer_id: str,
    decision: str,
    accuracy_flags: Optional[Dict[str, bool]],
    notes: Optional[str],
    confidence: int
) -> Dict[str, Any]:
    """
    Record a reviewer's decision on a pending submission.

    Returns:
        Dict with the stored review, points_earned, the reviewer's badge (if
        one was earned), the submission status after aggregation and whether
        a follow-up had to be queued
    """
    cleaned = validate_review_input(submission_id, decision, accuracy_flags, notes, confidence)
    submission = check_reviewable(store, submission_id, reviewer_id)

    review = store.insert_review({
        'submissionId': submission_id,
        'reviewerId': reviewer_id,
        'decision': cleaned['decision'],
        'reviewNotes': cleaned['notes'],
        'nameAccurate': cleaned['flags']['name_accurate'],
        'locationAccurate': cleaned['flags']['location_accurate'],
        'detailsAccurate': cleaned['flags']['details_accurate'],
        'featuresAccurate': cleaned['flags']['features_accurate'],
        'confidenceLevel': cleaned['confidence']
    })

    badge = None
    try:
        credit = award_review_credit(store, reviewer_id)
        badge = credit['badge_awarded']
    except Exception as e:
        logger.error(f"Reputation credit dropped for {reviewer_id} (review {review['reviewId']}): {e}")

    status = submission.get('status')
    followup_scheduled = False
    try:
        outcome = aggregate(store, submission_id)
    except Exception as e:
        logger.error(f"Aggregation failed for {submission_id} after review {review['reviewId']}: {e}")
        followup_scheduled = schedule_review_followup(submission_id, 'aggregate')
    else:
        status = outcome or current_status(store, submission_id, status)

    return {
        'review': review,
        'points_earned': POINTS_PER_REVIEW,
        'badge_awarded': badge,
        'submission_status': status,
        'followup_scheduled': followup_scheduled
    }


def current_status(store, submission_id: str, observed: str) -> str:
    """
    Status after aggregation, which a concurrent review may have applied.
    Falls back to the status observed before the review when the read fails.
    """
    try:
        submission = store.get_submission(submission_id)
    except StoreError as e:
        logger.warning(f"Could not re-read status of {submission_id}: {e}")
        return observed
    return (submission or {}).get('status', observed)


def process_followup(store, submission_id: str) -> Dict[str, Any]:
    """
    Replay the idempotent trailing steps for a submission.

    Returns:
        Dict with the status applied by this run and whether a missing
        notification was written
    """
    outcome = aggregate(store, submission_id)
    notified = False
    if outcome is None:
        # Already decided by an earlier run whose notification may be missing
        notified = ensure_outcome_notified(store, submission_id)

    return {'applied_status': outcome, 'notification_written': notified}
