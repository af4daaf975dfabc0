"""
Data models and status constants for the NiteFinder community review backend.
Based on the submission lifecycle: Submitted → Pending (community review) → Approved/Rejected
"""


class SubmissionStatus:
    """Bar submission review statuses."""
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    ALL = (PENDING, APPROVED, REJECTED)
    FINAL = (APPROVED, REJECTED)


class ReviewDecision:
    """Decisions a reviewer can cast on a submission."""
    APPROVE = 'approve'
    REJECT = 'reject'
    NEEDS_CHANGES = 'needs_changes'  # Counts toward quorum only

    ALL = (APPROVE, REJECT, NEEDS_CHANGES)


class ReviewerStatus:
    """Reviewer privilege statuses on a user profile."""
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    ALL = (PENDING, APPROVED, REJECTED)


class NotificationType:
    """Notification kinds emitted when a submission is decided."""
    SUBMISSION_APPROVED = 'submission_approved'
    SUBMISSION_REJECTED = 'submission_rejected'

    @staticmethod
    def for_outcome(outcome: str) -> str:
        return f'submission_{outcome}'


class BadgeType:
    """Reviewer reputation badges."""
    FIRST_REVIEW = 'first_review'
    HELPFUL_REVIEWER = 'helpful_reviewer'
    COMMUNITY_CHAMPION = 'community_champion'
    REVIEW_MASTER = 'review_master'


# Venue attribute vocabularies accepted on bar submissions
LINEUP_TIMES = ('0-10 min', '15-30 min', '30+ min')
COVER_FREQUENCIES = ('No cover', 'Sometimes', 'Yes-always')
COVER_AMOUNTS = ('Under $10', '$10-$20', 'Over $20')
AGE_GROUPS = ('18-21', '22-25', '25-30')
MUSIC_GENRES = (
    'House', 'EDM', 'Hip-hop', 'Rap', 'Top 40', 'Pop',
    'Mixed/Variety', 'Live bands', 'City-pop', 'Jazz',
)
DAYS_OF_WEEK = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
CAPACITY_SIZES = ('Intimate (<50)', 'Medium (50-150)', 'Large (150+)')
AMENITY_FLAGS = (
    'has_patio', 'has_rooftop', 'has_dancefloor',
    'has_food', 'has_pool_table', 'has_arcade_games',
)
