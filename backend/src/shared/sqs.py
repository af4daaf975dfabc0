"""
SQS utility functions for message operations.
"""
import boto3
import json
from typing import Dict, Any
from .config import config
from .logging import logger

sqs = boto3.client('sqs', region_name=config.AWS_REGION)


def send_message(queue_url: str, message_body: Dict[str, Any]) -> bool:
    """
    Send a single message to SQS queue.

    Args:
        queue_url: SQS queue URL
        message_body: Message body as dict (will be JSON serialized)

    Returns:
        True if sent successfully, False otherwise
    """
    try:
        sqs.send_message(
            QueueUrl=queue_url,
            MessageBody=json.dumps(message_body, default=str)
        )
        logger.info(f"Message sent to {queue_url}")
        return True
    except Exception as e:
        logger.error(f"Error sending message to SQS: {e}")
        return False


def schedule_review_followup(submission_id: str, failed_step: str) -> bool:
    """
    Queue a retry of the idempotent post-review steps (aggregation, notification).

    Returns:
        True if the follow-up was queued
    """
    if not config.REVIEW_FOLLOWUP_QUEUE_URL:
        logger.error(f"No follow-up queue configured, {failed_step} for {submission_id} dropped")
        return False

    return send_message(config.REVIEW_FOLLOWUP_QUEUE_URL, {
        'submissionId': submission_id,
        'failedStep': failed_step
    })
