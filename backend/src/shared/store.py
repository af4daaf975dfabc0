"""
DynamoDB backed store for submissions, reviews, reviewer reputation and notifications.

Table layout:
- Submissions:   PK submissionId; GSIs byUser (userId), byStatus (status),
                 byNeighbourhood (neighbourhoodKey)
- Reviews:       PK submissionId, SK reviewerId; GSI byReviewer (reviewerId)
- Users:         PK userId
- Badges:        PK userId, SK badgeType
- Notifications: PK notificationId; GSI byUser (userId, createdAt)
- Bars:          PK barId; GSI byNeighbourhood (neighbourhoodKey)

Uniqueness of (submission, reviewer) and of (user, badge type) comes from the
table keys plus attribute_not_exists conditions, and the status transition is
a conditional update, so concurrent requests cannot double-apply them.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key

from . import dynamo
from .config import config
from .dynamo import ConditionalCheckFailed
from .errors import ConflictError, NotFoundError
from .logging import logger
from .models import SubmissionStatus


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_key(value: Optional[str]) -> str:
    """Lowercased, trimmed lookup key (used for neighbourhood indexes)."""
    return (value or '').lower().strip()


def notification_id(submission_id: str, kind: str) -> str:
    """One notification per submission and outcome."""
    return f'{submission_id}#{kind}'


class ReviewStore:
    """Narrow data-store interface consumed by the review workflow."""

    def __init__(
        self,
        submissions_table: str = None,
        reviews_table: str = None,
        users_table: str = None,
        badges_table: str = None,
        notifications_table: str = None,
        bars_table: str = None
    ):
        self.submissions_table = submissions_table or config.SUBMISSIONS_TABLE
        self.reviews_table = reviews_table or config.REVIEWS_TABLE
        self.users_table = users_table or config.USERS_TABLE
        self.badges_table = badges_table or config.BADGES_TABLE
        self.notifications_table = notifications_table or config.NOTIFICATIONS_TABLE
        self.bars_table = bars_table or config.BARS_TABLE

    # ------------------------------------------------------------------
    # Users / reviewer reputation
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return dynamo.get_item(self.users_table, {'userId': user_id})

    def get_user_reviewer_status(self, user_id: str) -> Optional[str]:
        """Reviewer status of the user, or None when the user does not exist."""
        user = self.get_user(user_id)
        if not user:
            return None
        return user.get('reviewerStatus')

    def set_reviewer_status(self, user_id: str, status: str) -> Dict[str, Any]:
        try:
            return dynamo.update_item(
                self.users_table,
                key={'userId': user_id},
                update_expression='SET reviewerStatus = :status, updatedAt = :ts',
                expression_values={':status': status, ':ts': utc_now()},
                condition_expression='attribute_exists(userId)',
                return_values='ALL_NEW'
            )
        except ConditionalCheckFailed as e:
            raise NotFoundError('User not found', error='User not found') from e

    def increment_reviewer_stats(self, user_id: str, review_increment: int, points_increment: int) -> int:
        """
        Atomically add to the completed-review count and loyalty points.

        Returns:
            The review count after the increment
        """
        attributes = dynamo.update_item(
            self.users_table,
            key={'userId': user_id},
            update_expression='ADD totalReviewsCompleted :reviews, loyaltyPoints :points SET updatedAt = :ts',
            expression_values={
                ':reviews': review_increment,
                ':points': points_increment,
                ':ts': utc_now()
            },
            return_values='UPDATED_NEW'
        )
        return int(attributes.get('totalReviewsCompleted', 0))

    def get_reviewer_review_count(self, user_id: str) -> int:
        user = dynamo.get_item(self.users_table, {'userId': user_id}, consistent_read=True)
        return int((user or {}).get('totalReviewsCompleted', 0))

    def insert_badge(self, user_id: str, badge_type: str, name: str, description: str) -> bool:
        """
        Award a badge unless the user already holds that type.

        Returns:
            True if the badge was written, False if it already existed
        """
        try:
            dynamo.put_item(
                self.badges_table,
                item={
                    'userId': user_id,
                    'badgeType': badge_type,
                    'badgeName': name,
                    'badgeDescription': description,
                    'awardedAt': utc_now()
                },
                condition_expression='attribute_not_exists(badgeType)'
            )
            return True
        except ConditionalCheckFailed:
            logger.warning(f"Badge {badge_type} already awarded to {user_id}")
            return False

    def list_badges(self, user_id: str) -> List[Dict[str, Any]]:
        return dynamo.query(
            self.badges_table,
            key_condition=Key('userId').eq(user_id)
        )

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def find_review(self, submission_id: str, reviewer_id: str) -> Optional[Dict[str, Any]]:
        return dynamo.get_item(
            self.reviews_table,
            {'submissionId': submission_id, 'reviewerId': reviewer_id},
            consistent_read=True
        )

    def insert_review(self, review: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new review. The (submissionId, reviewerId) key is unique.

        Raises:
            ConflictError: the reviewer already reviewed this submission
        """
        item = dict(review)
        item.setdefault('reviewId', str(uuid.uuid4()))
        item.setdefault('createdAt', utc_now())

        try:
            dynamo.put_item(
                self.reviews_table,
                item=item,
                condition_expression='attribute_not_exists(reviewerId)'
            )
        except ConditionalCheckFailed as e:
            logger.warning(
                f"Concurrent duplicate review by {item['reviewerId']} on {item['submissionId']}"
            )
            raise ConflictError(
                'You have already reviewed this submission.',
                error='Already reviewed'
            ) from e

        logger.info(f"Review {item['reviewId']} stored for submission {item['submissionId']}")
        return item

    def list_reviews(self, submission_id: str) -> List[Dict[str, Any]]:
        return dynamo.query(
            self.reviews_table,
            key_condition=Key('submissionId').eq(submission_id),
            consistent_read=True
        )

    def list_reviews_by_reviewer(self, reviewer_id: str) -> List[Dict[str, Any]]:
        return dynamo.query(
            self.reviews_table,
            index_name='byReviewer',
            key_condition=Key('reviewerId').eq(reviewer_id)
        )

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    def get_submission(self, submission_id: str) -> Optional[Dict[str, Any]]:
        return dynamo.get_item(
            self.submissions_table,
            {'submissionId': submission_id},
            consistent_read=True
        )

    def insert_submission(self, submission: Dict[str, Any]) -> Dict[str, Any]:
        item = dict(submission)
        timestamp = utc_now()
        item.setdefault('submissionId', str(uuid.uuid4()))
        item.setdefault('status', SubmissionStatus.PENDING)
        item.setdefault('createdAt', timestamp)
        item.setdefault('updatedAt', timestamp)
        item['neighbourhoodKey'] = normalize_key(item.get('neighbourhood'))

        dynamo.put_item(
            self.submissions_table,
            item=item,
            condition_expression='attribute_not_exists(submissionId)'
        )
        logger.info(f"Submission {item['submissionId']} created by {item.get('userId')}")
        return item

    def list_submissions(self, user_id: str = None, status: str = None) -> List[Dict[str, Any]]:
        """Submissions newest first, by owner and/or status (defaults to pending)."""
        if user_id:
            return dynamo.query(
                self.submissions_table,
                index_name='byUser',
                key_condition=Key('userId').eq(user_id),
                filter_expression=Attr('status').eq(status) if status else None,
                scan_forward=False
            )

        return dynamo.query(
            self.submissions_table,
            index_name='byStatus',
            key_condition=Key('status').eq(status or SubmissionStatus.PENDING),
            scan_forward=False
        )

    def find_similar_submissions(self, neighbourhood: str) -> List[Dict[str, Any]]:
        """Pending or approved submissions in the same neighbourhood."""
        return dynamo.query(
            self.submissions_table,
            index_name='byNeighbourhood',
            key_condition=Key('neighbourhoodKey').eq(normalize_key(neighbourhood)),
            filter_expression=Attr('status').is_in([SubmissionStatus.PENDING, SubmissionStatus.APPROVED])
        )

    def find_similar_bars(self, neighbourhood: str) -> List[Dict[str, Any]]:
        """Published bars in the same neighbourhood."""
        return dynamo.query(
            self.bars_table,
            index_name='byNeighbourhood',
            key_condition=Key('neighbourhoodKey').eq(normalize_key(neighbourhood))
        )

    def update_submission_status_if_pending(
        self,
        submission_id: str,
        new_status: str,
        reviewed_at: str,
        resolved_by: str = None
    ) -> bool:
        """
        Move a submission out of pending. resolved_by marks a manual (admin) decision.

        Returns:
            True if the update applied, False if the submission was no longer pending
        """
        update_expression = 'SET #status = :new_status, reviewedAt = :ts, updatedAt = :ts'
        values = {
            ':new_status': new_status,
            ':pending': SubmissionStatus.PENDING,
            ':ts': reviewed_at
        }
        if resolved_by:
            update_expression += ', resolvedBy = :resolved_by'
            values[':resolved_by'] = resolved_by

        try:
            dynamo.update_item(
                self.submissions_table,
                key={'submissionId': submission_id},
                update_expression=update_expression,
                expression_names={'#status': 'status'},
                expression_values=values,
                condition_expression='#status = :pending'
            )
        except ConditionalCheckFailed:
            logger.warning(f"Submission {submission_id} no longer pending, skipped {new_status}")
            return False

        logger.info(f"Submission {submission_id} marked as {new_status}")
        return True

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def insert_notification(self, user_id: str, submission_id: str, kind: str, message: str) -> bool:
        """
        Store an outcome notification.

        Returns:
            True if written, False if this submission already has one of this kind
        """
        try:
            dynamo.put_item(
                self.notifications_table,
                item={
                    'notificationId': notification_id(submission_id, kind),
                    'userId': user_id,
                    'submissionId': submission_id,
                    'notificationType': kind,
                    'message': message,
                    'read': False,
                    'createdAt': utc_now()
                },
                condition_expression='attribute_not_exists(notificationId)'
            )
            return True
        except ConditionalCheckFailed:
            logger.warning(f"Notification {kind} for {submission_id} already exists")
            return False

    def list_notifications(self, user_id: str) -> List[Dict[str, Any]]:
        return dynamo.query(
            self.notifications_table,
            index_name='byUser',
            key_condition=Key('userId').eq(user_id),
            scan_forward=False
        )
