from reservations.services.capacity import ScreeningCapacityTracker
from reservations.services.occupancy import SeatOccupancyLedger
from reservations.services.reservations import ReservationService
from reservations.services.scheduler import ScreeningScheduler

__all__ = [
    "ReservationService",
    "ScreeningCapacityTracker",
    "ScreeningScheduler",
    "SeatOccupancyLedger",
]
