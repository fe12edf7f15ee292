from reservations.stores.interfaces import ReservationStore, ScreeningStore, UserDirectory

__all__ = ["ReservationStore", "ScreeningStore", "UserDirectory"]
