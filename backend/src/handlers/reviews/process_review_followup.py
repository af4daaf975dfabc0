"""
Review Follow-up Handler.
Triggered by SQS (Review Follow-up Queue).

Replays aggregation and the outcome notification for a submission whose
post-review steps failed inside the original request. Both steps are
idempotent, so redelivered messages are harmless.
"""
import json

from shared.logging import logger
from shared.review_service import process_followup
from shared.store import ReviewStore

store = ReviewStore()


def handler(event, context):
    """
    Handler for SQS follow-up messages.
    Failed records are reported back so SQS redelivers only those.
    """
    failures = []

    for record in event.get('Records', []):
        try:
            body = json.loads(record['body'])
            submission_id = body['submissionId']
            result = process_followup(store, submission_id)
            logger.info(
                f"Follow-up for {submission_id} ({body.get('failedStep')}): "
                f"applied={result['applied_status']}, notified={result['notification_written']}"
            )
        except Exception as e:
            logger.exception(f"Error processing follow-up record {record.get('messageId')}: {e}")
            failures.append({'itemIdentifier': record.get('messageId')})

    return {'batchItemFailures': failures}
