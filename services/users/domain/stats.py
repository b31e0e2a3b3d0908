from __future__ import annotations

import math
from typing import Iterable

from services.users.domain.user import User, UserStats


def round_half_up(value: float, digits: int = 2) -> float:
    """Round ``value`` to ``digits`` decimals, ties going towards +infinity."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def compute_user_stats(users: Iterable[User]) -> UserStats:
    users = list(users)
    total = len(users)
    active = sum(1 for user in users if user.is_active)
    if total == 0:
        return UserStats(total=0, active=0, average_age=0)
    average_age = sum(user.age for user in users) / total
    return UserStats(
        total=total,
        active=active,
        average_age=round_half_up(average_age, 2),
    )
