"""
Community decision aggregation (majority voting over a fixed quorum).

A submission stays pending until it has REVIEW_QUORUM reviews. From then on it
is approved once MAJORITY_THRESHOLD reviewers approve, otherwise rejected once
MAJORITY_THRESHOLD reviewers reject. 'needs_changes' fills the quorum without
pulling either way, so a split such as 2 approve / 2 reject / 1 needs_changes
leaves the submission pending for an admin to resolve.
"""
from typing import Dict, Iterable, Optional

from .config import config
from .logging import logger
from .models import ReviewDecision, SubmissionStatus
from .notifications import notify
from .store import utc_now


def tally(reviews: Iterable[dict], quorum: int = None) -> Dict[str, int]:
    """Count decisions for a submission's reviews."""
    quorum = config.REVIEW_QUORUM if quorum is None else quorum
    decisions = [r.get('decision') for r in reviews]

    return {
        'review_count': len(decisions),
        'approval_count': decisions.count(ReviewDecision.APPROVE),
        'rejection_count': decisions.count(ReviewDecision.REJECT),
        'needs_changes_count': decisions.count(ReviewDecision.NEEDS_CHANGES),
        'reviews_needed': max(0, quorum - len(decisions))
    }


def decide(reviews: Iterable[dict], quorum: int = None, threshold: int = None) -> Optional[str]:
    """
    Decide a submission's outcome from its reviews.

    Args:
        reviews: Review items with a 'decision' field
        quorum: Reviews required before any decision (default REVIEW_QUORUM)
        threshold: Votes required on one side (default MAJORITY_THRESHOLD)

    Returns:
        SubmissionStatus.APPROVED / REJECTED, or None to stay pending
    """
    quorum = config.REVIEW_QUORUM if quorum is None else quorum
    threshold = config.MAJORITY_THRESHOLD if threshold is None else threshold
    counts = tally(reviews, quorum)

    if counts['review_count'] < quorum:
        return None

    if counts['approval_count'] >= threshold:
        return SubmissionStatus.APPROVED
    if counts['rejection_count'] >= threshold:
        return SubmissionStatus.REJECTED

    logger.info(
        f"No majority at quorum: {counts['approval_count']} approve, "
        f"{counts['rejection_count']} reject, {counts['needs_changes_count']} needs_changes"
    )
    return None


def aggregate(store, submission_id: str, now: str = None) -> Optional[str]:
    """
    Re-evaluate a submission after a review has been stored.

    The status change is a conditional update on 'pending', so concurrent or
    repeated runs transition (and notify) at most once.

    Returns:
        The status applied by this run, or None if nothing changed
    """
    reviews = store.list_reviews(submission_id)
    outcome = decide(reviews)

    logger.info(f"Quorum check for {submission_id}: {len(reviews)}/{config.REVIEW_QUORUM} reviews")

    if outcome is None:
        return None

    return outcome if apply_outcome(store, submission_id, outcome, now) else None


def apply_outcome(store, submission_id: str, outcome: str, now: str = None, resolved_by: str = None) -> bool:
    """
    Transition a pending submission to its final status and notify the owner.
    Shared by community aggregation and manual admin resolution (resolved_by
    set to the admin id).

    Returns:
        True if this call made the transition, False if it was already decided
    """
    if outcome not in SubmissionStatus.FINAL:
        raise ValueError(f"Not a final submission status: {outcome}")

    if not store.update_submission_status_if_pending(submission_id, outcome, now or utc_now(), resolved_by):
        return False

    notify(store, submission_id, outcome)
    return True
