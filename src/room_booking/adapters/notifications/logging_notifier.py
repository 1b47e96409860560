import logging

from ...domain.entities import ReservationNotice
from ...domain.ports import ReservationNotifier

logger = logging.getLogger(__name__)


class LoggingReservationNotifier(ReservationNotifier):
    """
    Notifier that records confirmations in the log.

    Stands in for mail delivery, which lives outside this service.
    """

    def reservation_created(self, notice: ReservationNotice) -> None:
        logger.info(
            "Reservation confirmation",
            extra={
                "reservation_id": notice.reservation_id,
                "recipient": notice.user_email,
                "room_name": notice.room_name,
                "start_time": notice.start_time.isoformat(),
                "end_time": notice.end_time.isoformat(),
            },
        )
