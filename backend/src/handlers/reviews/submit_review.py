"""
Submit Review Handler.
POST /submission-reviews
"""
from shared.auth import get_user_sub
from shared.errors import ReviewError, StoreError
from shared.logging import logger, log_event
from shared.review_service import ACCURACY_FLAGS, submit_review
from shared.store import ReviewStore
from shared.utils import error_response, format_response, parse_body, server_error_response, to_api

store = ReviewStore()


def handler(event, context):
    """
    POST /submission-reviews
    Body: {
        "submission_id": "...",
        "decision": "approve" | "reject" | "needs_changes",
        "review_notes": "...",
        "name_accurate": true, "location_accurate": true,
        "details_accurate": true, "features_accurate": true,
        "confidence_level": 1-5
    }
    """
    log_event(event)

    reviewer_id = get_user_sub(event)
    if not reviewer_id:
        return format_response(401, {'error': 'Authentication required'})

    body = parse_body(event)

    try:
        result = submit_review(
            store,
            submission_id=body.get('submission_id'),
            reviewer_id=reviewer_id,
            decision=body.get('decision'),
            accuracy_flags={flag: body[flag] for flag in ACCURACY_FLAGS if flag in body},
            notes=body.get('review_notes'),
            confidence=body.get('confidence_level')
        )
    except StoreError as e:
        return server_error_response(e, 'submitting review')
    except ReviewError as e:
        logger.info(f"Review by {reviewer_id} refused: {e.error}")
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'submitting review')

    return format_response(200, {
        'success': True,
        'message': 'Review submitted successfully! Thank you for helping the community.',
        'review': to_api(result['review'], id_field='reviewId'),
        'points_earned': result['points_earned'],
        'badge_awarded': result['badge_awarded'],
        'submission_status': result['submission_status']
    })
