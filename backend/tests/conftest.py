"""
Shared fixtures: an in-memory stand-in for the DynamoDB review store.
"""
import json
import os
import sys
import uuid

import pytest

# Add src to path for import (shared/, handlers/)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shared.errors import ConflictError  # noqa: E402
from shared.models import ReviewerStatus, SubmissionStatus  # noqa: E402
from shared.store import notification_id  # noqa: E402


class InMemoryStore:
    """Same contract as ReviewStore, with the table key guarantees kept."""

    def __init__(self):
        self.users = {}
        self.submissions = {}
        self.reviews = {}
        self.badges = {}
        self.notifications = {}
        self.bars = []
        self.status_updates = 0

    # -- seeding helpers ----------------------------------------------------

    def add_user(self, user_id, reviewer_status=ReviewerStatus.APPROVED, reviews=0, points=0):
        self.users[user_id] = {
            'userId': user_id,
            'reviewerStatus': reviewer_status,
            'totalReviewsCompleted': reviews,
            'loyaltyPoints': points
        }
        return self.users[user_id]

    def add_submission(self, submission_id, owner_id='owner', status=SubmissionStatus.PENDING, name='The Drake'):
        self.submissions[submission_id] = {
            'submissionId': submission_id,
            'userId': owner_id,
            'name': name,
            'neighbourhood': 'Queen West',
            'status': status
        }
        return self.submissions[submission_id]

    def add_reviews(self, submission_id, decisions):
        for i, decision in enumerate(decisions):
            reviewer_id = f'seed-reviewer-{i}'
            self.reviews[(submission_id, reviewer_id)] = {
                'reviewId': str(uuid.uuid4()),
                'submissionId': submission_id,
                'reviewerId': reviewer_id,
                'decision': decision,
                'createdAt': f'2024-01-30T10:0{i}:00+00:00'
            }

    def notifications_for(self, submission_id):
        return [n for n in self.notifications.values() if n['submissionId'] == submission_id]

    def reviews_for(self, submission_id):
        return [r for (s, _), r in self.reviews.items() if s == submission_id]

    # -- store contract -----------------------------------------------------

    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_reviewer_status(self, user_id):
        user = self.users.get(user_id)
        return user.get('reviewerStatus') if user else None

    def set_reviewer_status(self, user_id, status):
        self.users[user_id]['reviewerStatus'] = status
        return self.users[user_id]

    def find_review(self, submission_id, reviewer_id):
        return self.reviews.get((submission_id, reviewer_id))

    def get_submission(self, submission_id):
        submission = self.submissions.get(submission_id)
        return dict(submission) if submission else None

    def insert_review(self, review):
        key = (review['submissionId'], review['reviewerId'])
        if key in self.reviews:
            raise ConflictError('You have already reviewed this submission.', error='Already reviewed')
        item = dict(review, reviewId=str(uuid.uuid4()), createdAt='2024-01-31T12:00:00+00:00')
        self.reviews[key] = item
        return item

    def increment_reviewer_stats(self, user_id, review_increment, points_increment):
        user = self.users.setdefault(user_id, {'userId': user_id, 'totalReviewsCompleted': 0, 'loyaltyPoints': 0})
        user['totalReviewsCompleted'] = user.get('totalReviewsCompleted', 0) + review_increment
        user['loyaltyPoints'] = user.get('loyaltyPoints', 0) + points_increment
        return user['totalReviewsCompleted']

    def get_reviewer_review_count(self, user_id):
        return self.users.get(user_id, {}).get('totalReviewsCompleted', 0)

    def insert_badge(self, user_id, badge_type, name, description):
        if (user_id, badge_type) in self.badges:
            return False
        self.badges[(user_id, badge_type)] = {
            'userId': user_id, 'badgeType': badge_type,
            'badgeName': name, 'badgeDescription': description
        }
        return True

    def list_badges(self, user_id):
        return [b for (u, _), b in self.badges.items() if u == user_id]

    def list_reviews(self, submission_id):
        return self.reviews_for(submission_id)

    def list_reviews_by_reviewer(self, reviewer_id):
        return [r for (_, rid), r in self.reviews.items() if rid == reviewer_id]

    def update_submission_status_if_pending(self, submission_id, new_status, reviewed_at, resolved_by=None):
        submission = self.submissions[submission_id]
        if submission['status'] != SubmissionStatus.PENDING:
            return False
        submission['status'] = new_status
        submission['reviewedAt'] = reviewed_at
        if resolved_by:
            submission['resolvedBy'] = resolved_by
        self.status_updates += 1
        return True

    def insert_notification(self, user_id, submission_id, kind, message):
        key = notification_id(submission_id, kind)
        if key in self.notifications:
            return False
        self.notifications[key] = {
            'notificationId': key, 'userId': user_id, 'submissionId': submission_id,
            'notificationType': kind, 'message': message, 'read': False
        }
        return True

    def list_notifications(self, user_id):
        return [n for n in self.notifications.values() if n['userId'] == user_id]

    def insert_submission(self, submission):
        item = dict(submission)
        item.setdefault('submissionId', str(uuid.uuid4()))
        self.submissions[item['submissionId']] = item
        return item

    def list_submissions(self, user_id=None, status=None):
        items = list(self.submissions.values())
        if user_id:
            items = [s for s in items if s.get('userId') == user_id]
        if status or not user_id:
            items = [s for s in items if s.get('status') == (status or SubmissionStatus.PENDING)]
        return items

    def find_similar_submissions(self, neighbourhood):
        key = neighbourhood.lower().strip()
        return [
            s for s in self.submissions.values()
            if (s.get('neighbourhood') or '').lower().strip() == key
            and s.get('status') in (SubmissionStatus.PENDING, SubmissionStatus.APPROVED)
        ]

    def find_similar_bars(self, neighbourhood):
        key = neighbourhood.lower().strip()
        return [b for b in self.bars if (b.get('neighbourhood') or '').lower().strip() == key]


@pytest.fixture
def store():
    return InMemoryStore()


def api_event(sub=None, body=None, query=None, path=None, groups=None):
    """Build an API Gateway Lambda proxy event."""
    event = {
        'body': json.dumps(body) if body is not None else None,
        'queryStringParameters': query,
        'pathParameters': path,
        'requestContext': {}
    }
    if sub:
        claims = {'sub': sub}
        if groups:
            claims['cognito:groups'] = ','.join(groups)
        event['requestContext'] = {'authorizer': {'claims': claims}}
    return event
