"""
List Reviews Handler.
GET /submission-reviews?submissionId=...&userId=...

Returns reviews newest first. When filtering by submission, the response also
carries the vote tally and how many reviews are still needed for quorum.
"""
from shared.aggregation import tally
from shared.auth import get_user_sub
from shared.errors import ReviewError
from shared.logging import log_event
from shared.store import ReviewStore
from shared.utils import error_response, format_response, get_query_param, server_error_response, to_api

store = ReviewStore()


def handler(event, context):
    log_event(event)

    if not get_user_sub(event):
        return format_response(401, {'error': 'Authentication required'})

    submission_id = get_query_param(event, 'submissionId')
    reviewer_id = get_query_param(event, 'userId')

    if not submission_id and not reviewer_id:
        return format_response(400, {'error': 'submissionId or userId is required'})

    try:
        if submission_id:
            reviews = store.list_reviews(submission_id)
            if reviewer_id:
                reviews = [r for r in reviews if r.get('reviewerId') == reviewer_id]
        else:
            reviews = store.list_reviews_by_reviewer(reviewer_id)
    except ReviewError as e:
        return error_response(e)
    except Exception as e:
        return server_error_response(e, 'listing reviews')

    reviews.sort(key=lambda r: r.get('createdAt', ''), reverse=True)

    body = {'reviews': [to_api(r, id_field='reviewId') for r in reviews]}
    if submission_id:
        body.update(tally(reviews))

    return format_response(200, body)
