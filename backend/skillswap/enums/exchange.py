"""
Exchange status values
"""

import enum


class ExchangeStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


# Statuses counted as "active" everywhere (dashboard, /exchanges/active)
ACTIVE_STATUSES = frozenset({ExchangeStatus.ACCEPTED, ExchangeStatus.IN_PROGRESS})

# Statuses during which a next session may be scheduled
SCHEDULABLE_STATUSES = ACTIVE_STATUSES
