"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the review backend.
"""
import os


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # DynamoDB Tables
    SUBMISSIONS_TABLE = os.environ.get('SUBMISSIONS_TABLE', '')
    REVIEWS_TABLE = os.environ.get('REVIEWS_TABLE', '')
    USERS_TABLE = os.environ.get('USERS_TABLE', '')
    BADGES_TABLE = os.environ.get('BADGES_TABLE', '')
    NOTIFICATIONS_TABLE = os.environ.get('NOTIFICATIONS_TABLE', '')
    BARS_TABLE = os.environ.get('BARS_TABLE', '')

    # SQS Queues
    REVIEW_FOLLOWUP_QUEUE_URL = os.environ.get('REVIEW_FOLLOWUP_QUEUE_URL', '')

    # Community review (majority voting) configuration
    REVIEW_QUORUM = int(os.environ.get('REVIEW_QUORUM', '5'))  # Reviews required before deciding
    MAJORITY_THRESHOLD = int(os.environ.get('MAJORITY_THRESHOLD', '3'))  # Votes needed on one side
    POINTS_PER_REVIEW = int(os.environ.get('POINTS_PER_REVIEW', '10'))

    # Review form bounds
    CONFIDENCE_MIN = 1
    CONFIDENCE_MAX = 5
    REVIEW_NOTES_MAX_LENGTH = int(os.environ.get('REVIEW_NOTES_MAX_LENGTH', '1000'))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


config = Config()
