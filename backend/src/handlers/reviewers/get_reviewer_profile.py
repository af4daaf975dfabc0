"""
Get Reviewer Profile Handler.
GET /reviewers/me

Returns the caller's reviewer status, review count, loyalty points, badges
and progress toward the next badge.
"""
from shared.auth import get_user_sub
from shared.errors import ReviewError
from shared.gamification import get_badge_progress
from shared.logging import log_event
from shared.models import ReviewerStatus
from shared.store import ReviewStore
from shared.utils import error_response, format_response, server_error_response, to_api

store = ReviewStore()


def handler(event, context):
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'error': 'Authentication required'})

    try:
        user = store.get_user(user_id) or {}
        badges = store.list_badges(user_id)
    except ReviewError as e:
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'fetching reviewer profile')

    review_count = int(user.get('totalReviewsCompleted', 0))
    earned = {b['badgeType'] for b in badges}

    return format_response(200, {
        'user_id': user_id,
        'reviewer_status': user.get('reviewerStatus', ReviewerStatus.PENDING),
        'can_review': user.get('reviewerStatus') == ReviewerStatus.APPROVED,
        'total_reviews_completed': review_count,
        'loyalty_points': int(user.get('loyaltyPoints', 0)),
        'badges': [to_api(b) for b in badges],
        'progress': get_badge_progress(review_count, earned)
    })
