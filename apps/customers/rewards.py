"""
Reward arithmetic shared by the ledger, maintenance commands and reporters.

A counter is the triple (paid, earned, claimed) kept per customer and drink
category. Everything shown to staff or customers about a category's progress
is derived here from that triple and nowhere else.
"""

from django.db import models

REWARD_THRESHOLD = 5


class RewardStatus(models.TextChoices):
    PROGRESS = 'progress', 'In progress'
    UPCOMING = 'upcoming', 'Upcoming'
    READY = 'ready', 'Ready to claim'


def earned_for(paid: int) -> int:
    """Rewards unlocked by a number of paid drinks."""
    return paid // REWARD_THRESHOLD


def derive_status(paid: int, earned: int, claimed: int) -> dict:
    """
    Derive display fields for one reward counter.

    Branch order matters: a category with a pending reward reports "ready"
    even when it is also one drink away from the next one.

    Args:
        paid: Paid drinks in the category
        earned: Rewards unlocked (paid // 5)
        claimed: Rewards redeemed

    Returns:
        dict with progress, drinks_until_reward, pending and status
    """
    progress = paid % REWARD_THRESHOLD
    if progress == 0 and paid > 0:
        drinks_until_reward = 0
    else:
        drinks_until_reward = REWARD_THRESHOLD - progress
    pending = earned - claimed

    if paid <= 0:
        status = RewardStatus.PROGRESS
    elif pending > 0:
        status = RewardStatus.READY
    elif progress >= REWARD_THRESHOLD - 1:
        status = RewardStatus.UPCOMING
    else:
        status = RewardStatus.PROGRESS

    return {
        'progress': progress,
        'drinks_until_reward': drinks_until_reward,
        'pending': pending,
        'status': status.value,
    }


def reward_record(category: str, paid: int, earned: int, claimed: int) -> dict:
    """Full per-category record: the stored counter plus derived fields."""
    return {
        'category': category,
        'paid': paid,
        'earned': earned,
        'claimed': claimed,
        **derive_status(paid, earned, claimed),
    }
