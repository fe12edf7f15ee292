"""Business limits for reservations."""

from datetime import timedelta
from typing import Final

MAX_SEATS_PER_RESERVATION: Final[int] = 10

# Cancellation is allowed only while the screening is further away than this.
CANCELLATION_CUTOFF: Final[timedelta] = timedelta(hours=2)

REVENUE_WINDOW: Final[timedelta] = timedelta(days=30)
RECENT_RESERVATIONS_WINDOW: Final[timedelta] = timedelta(days=7)
