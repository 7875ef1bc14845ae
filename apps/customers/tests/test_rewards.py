"""
Tests for reward arithmetic.

derive_status is pure, so these run without a database.
"""
from apps.customers.rewards import (
    REWARD_THRESHOLD,
    RewardStatus,
    earned_for,
    derive_status,
    reward_record,
)


class TestEarnedFor:

    def test_threshold_is_five(self):
        assert REWARD_THRESHOLD == 5

    def test_floor_division(self):
        assert earned_for(0) == 0
        assert earned_for(4) == 0
        assert earned_for(5) == 1
        assert earned_for(9) == 1
        assert earned_for(10) == 2


class TestDeriveStatus:

    def test_no_paid_drinks(self):
        status = derive_status(0, 0, 0)

        assert status == {
            'progress': 0,
            'drinks_until_reward': 5,
            'pending': 0,
            'status': RewardStatus.PROGRESS.value,
        }

    def test_reward_ready(self):
        """Five paid mojitos: one reward pending."""
        status = derive_status(5, 1, 0)

        assert status['progress'] == 0
        assert status['drinks_until_reward'] == 0
        assert status['pending'] == 1
        assert status['status'] == 'ready'

    def test_claimed_reward_cycle_complete(self):
        """After claiming, a completed cycle reports progress with 0 to go."""
        status = derive_status(5, 1, 1)

        assert status['pending'] == 0
        assert status['drinks_until_reward'] == 0
        assert status['status'] == 'progress'

    def test_one_drink_away_is_upcoming(self):
        status = derive_status(4, 0, 0)

        assert status['progress'] == 4
        assert status['drinks_until_reward'] == 1
        assert status['status'] == 'upcoming'

    def test_ready_wins_over_upcoming(self):
        """Pending reward and one drink from the next: ready comes first."""
        status = derive_status(9, 1, 0)

        assert status['progress'] == 4
        assert status['status'] == 'ready'

    def test_in_progress(self):
        status = derive_status(7, 1, 1)

        assert status['progress'] == 2
        assert status['drinks_until_reward'] == 3
        assert status['status'] == 'progress'

    def test_pure(self):
        assert derive_status(6, 1, 0) == derive_status(6, 1, 0)


class TestRewardRecord:

    def test_includes_counter_and_derived_fields(self):
        record = reward_record('Mojito', 5, 1, 0)

        assert record == {
            'category': 'Mojito',
            'paid': 5,
            'earned': 1,
            'claimed': 0,
            'progress': 0,
            'drinks_until_reward': 0,
            'pending': 1,
            'status': 'ready',
        }
