"""
Gamification module - Reviewer reputation points and badge milestones.
"""
from typing import Optional

from .config import config
from .logging import logger
from .models import BadgeType


# Badge milestones: completed review count -> badge
BADGE_MILESTONES = {
    1: {
        'type': BadgeType.FIRST_REVIEW,
        'name': 'First Review',
        'description': 'Completed your first community review'
    },
    10: {
        'type': BadgeType.HELPFUL_REVIEWER,
        'name': 'Helpful Reviewer',
        'description': 'Completed 10 community reviews'
    },
    50: {
        'type': BadgeType.COMMUNITY_CHAMPION,
        'name': 'Community Champion',
        'description': 'Completed 50 community reviews'
    },
    100: {
        'type': BadgeType.REVIEW_MASTER,
        'name': 'Review Master',
        'description': 'Completed 100 community reviews'
    },
}

POINTS_PER_REVIEW = config.POINTS_PER_REVIEW


def badge_for_count(review_count: int) -> Optional[dict]:
    """
    Badge earned by reaching exactly this completed review count.

    Args:
        review_count: Completed reviews after the latest one was counted

    Returns:
        Badge definition dict, or None if the count is not a milestone
    """
    return BADGE_MILESTONES.get(review_count)


def award_review_credit(store, reviewer_id: str) -> dict:
    """
    Credit a reviewer for one completed review.
    The count and points are incremented atomically by the store; the badge
    is checked against the count returned by that same increment.

    Returns:
        Dict with the new review count and the badge awarded (if any)
    """
    review_count = store.increment_reviewer_stats(reviewer_id, 1, POINTS_PER_REVIEW)
    logger.info(f"Reviewer {reviewer_id} credited: reviews={review_count}, +{POINTS_PER_REVIEW} points")

    awarded = None
    badge = badge_for_count(review_count)
    if badge:
        if store.insert_badge(reviewer_id, badge['type'], badge['name'], badge['description']):
            awarded = badge
            logger.info(f"Reviewer {reviewer_id} earned badge {badge['type']}")

    return {
        'review_count': review_count,
        'points_earned': POINTS_PER_REVIEW,
        'badge_awarded': awarded
    }


def get_badge_progress(review_count: int, earned_types: set) -> dict:
    """
    Get progress information toward the next badge milestone.

    Args:
        review_count: Completed reviews so far
        earned_types: Badge types already held by the reviewer

    Returns:
        Dict with progress info
    """
    upcoming = [
        threshold for threshold, badge in sorted(BADGE_MILESTONES.items())
        if threshold > review_count and badge['type'] not in earned_types
    ]

    if not upcoming:
        return {
            'review_count': review_count,
            'next_badge': None,
            'reviews_to_go': 0,
            'progress_pct': 100
        }

    target = upcoming[0]
    return {
        'review_count': review_count,
        'next_badge': BADGE_MILESTONES[target]['type'],
        'reviews_to_go': target - review_count,
        'progress_pct': round(min(review_count / target, 1.0) * 100, 1)
    }
