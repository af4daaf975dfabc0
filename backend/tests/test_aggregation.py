"""
Tests for community decision aggregation (quorum + majority voting).
"""
import pytest
from unittest.mock import patch

from shared.aggregation import aggregate, apply_outcome, decide, tally
from shared.errors import StoreError
from shared.models import NotificationType, SubmissionStatus
from shared.notifications import ensure_outcome_notified


def reviews_of(*decisions):
    return [{'reviewId': str(i), 'decision': d} for i, d in enumerate(decisions)]


class TestDecide:
    """Tests for the pure decide() function."""

    @pytest.mark.parametrize('decisions', [
        [],
        ['approve'],
        ['approve', 'approve', 'approve', 'approve'],
        ['reject', 'reject', 'reject', 'reject'],
        ['needs_changes', 'approve', 'reject'],
    ])
    def test_below_quorum_stays_pending(self, decisions):
        """Fewer than 5 reviews never decide, whatever the mix."""
        assert decide(reviews_of(*decisions)) is None

    def test_three_approvals_at_quorum_approves(self):
        assert decide(reviews_of('approve', 'approve', 'approve', 'reject', 'reject')) == SubmissionStatus.APPROVED

    def test_three_rejections_at_quorum_rejects(self):
        assert decide(reviews_of('reject', 'reject', 'reject', 'approve', 'needs_changes')) == SubmissionStatus.REJECTED

    def test_split_vote_at_quorum_stays_pending(self):
        """2 approve / 2 reject / 1 needs_changes has no majority."""
        assert decide(reviews_of('approve', 'approve', 'reject', 'reject', 'needs_changes')) is None

    def test_needs_changes_fills_quorum_only(self):
        """3 approvals and 2 needs_changes still approve."""
        assert decide(reviews_of('approve', 'needs_changes', 'approve', 'needs_changes', 'approve')) == SubmissionStatus.APPROVED

    def test_all_needs_changes_stays_pending(self):
        assert decide(reviews_of(*['needs_changes'] * 5)) is None

    def test_counts_not_arrival_order(self):
        """A rejecting 5th review does not stop 3 earlier approvals from winning."""
        decisions = ['approve', 'approve', 'reject', 'approve', 'reject']
        assert decide(reviews_of(*decisions)) == SubmissionStatus.APPROVED
        assert decide(reviews_of(*reversed(decisions))) == SubmissionStatus.APPROVED

    def test_reviews_beyond_quorum_still_counted(self):
        decisions = ['approve', 'approve', 'reject', 'reject', 'needs_changes', 'reject']
        assert decide(reviews_of(*decisions)) == SubmissionStatus.REJECTED

    def test_custom_quorum_and_threshold(self):
        assert decide(reviews_of('approve', 'approve', 'reject'), quorum=3, threshold=2) == SubmissionStatus.APPROVED


class TestTally:

    def test_tally_counts_each_decision(self):
        counts = tally(reviews_of('approve', 'approve', 'reject', 'needs_changes'))

        assert counts == {
            'review_count': 4,
            'approval_count': 2,
            'rejection_count': 1,
            'needs_changes_count': 1,
            'reviews_needed': 1
        }

    def test_reviews_needed_never_negative(self):
        assert tally(reviews_of(*['approve'] * 7))['reviews_needed'] == 0


class TestAggregate:
    """Tests for aggregate() wiring decide() to the store."""

    def test_below_quorum_no_transition_no_notification(self, store):
        store.add_submission('s1')
        store.add_reviews('s1', ['approve'] * 4)

        assert aggregate(store, 's1') is None
        assert store.submissions['s1']['status'] == SubmissionStatus.PENDING
        assert store.notifications == {}

    def test_approval_transitions_and_notifies_owner(self, store):
        store.add_submission('s1', owner_id='u-owner', name='Bar Raval')
        store.add_reviews('s1', ['approve', 'approve', 'reject', 'approve', 'reject'])

        assert aggregate(store, 's1', now='2024-02-01T00:00:00+00:00') == SubmissionStatus.APPROVED

        submission = store.submissions['s1']
        assert submission['status'] == SubmissionStatus.APPROVED
        assert submission['reviewedAt'] == '2024-02-01T00:00:00+00:00'

        notifications = store.notifications_for('s1')
        assert len(notifications) == 1
        assert notifications[0]['userId'] == 'u-owner'
        assert notifications[0]['notificationType'] == NotificationType.SUBMISSION_APPROVED
        assert notifications[0]['message'] == 'Your submission "Bar Raval" has been approved by the community.'

    def test_rejection_notification_kind(self, store):
        store.add_submission('s1')
        store.add_reviews('s1', ['reject'] * 3 + ['approve'] * 2)

        assert aggregate(store, 's1') == SubmissionStatus.REJECTED
        assert store.notifications_for('s1')[0]['notificationType'] == NotificationType.SUBMISSION_REJECTED

    def test_split_vote_leaves_pending(self, store):
        store.add_submission('s1')
        store.add_reviews('s1', ['approve', 'approve', 'needs_changes', 'needs_changes', 'reject'])

        assert aggregate(store, 's1') is None
        assert store.submissions['s1']['status'] == SubmissionStatus.PENDING
        assert store.notifications == {}

    def test_rerun_on_decided_submission_is_noop(self, store):
        store.add_submission('s1')
        store.add_reviews('s1', ['approve'] * 5)

        assert aggregate(store, 's1') == SubmissionStatus.APPROVED
        assert aggregate(store, 's1') is None
        assert aggregate(store, 's1') is None

        assert store.status_updates == 1
        assert len(store.notifications_for('s1')) == 1

    def test_decided_status_never_reversed(self, store):
        """More rejections after approval do not move the submission."""
        store.add_submission('s1', status=SubmissionStatus.APPROVED)
        store.add_reviews('s1', ['reject'] * 5)

        assert aggregate(store, 's1') is None
        assert store.submissions['s1']['status'] == SubmissionStatus.APPROVED
        assert store.notifications == {}

    def test_racing_runs_transition_once(self, store):
        """Two runs that both saw a pending submission: only one update applies."""
        store.add_submission('s1')
        store.add_reviews('s1', ['approve'] * 5)

        results = [
            apply_outcome(store, 's1', SubmissionStatus.APPROVED),
            apply_outcome(store, 's1', SubmissionStatus.APPROVED),
        ]

        assert results == [True, False]
        assert len(store.notifications_for('s1')) == 1

    def test_manual_resolution_wording(self, store):
        """Admin decisions are not attributed to the community, also on replay."""
        store.add_submission('s1', owner_id='u-owner', name='Bar Raval')

        with patch.object(store, 'insert_notification', side_effect=StoreError()):
            with pytest.raises(StoreError):
                apply_outcome(store, 's1', SubmissionStatus.APPROVED, resolved_by='admin-1')

        assert ensure_outcome_notified(store, 's1') is True
        assert store.notifications_for('s1')[0]['message'] == (
            'Your submission "Bar Raval" has been approved by a NiteFinder moderator.'
        )

    def test_apply_outcome_rejects_pending_target(self, store):
        store.add_submission('s1')
        with pytest.raises(ValueError):
            apply_outcome(store, 's1', SubmissionStatus.PENDING)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
