import logging
from typing import Protocol

from salon_backend.models.appointment import Appointment

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send_booking_confirmation(self, appointment: Appointment) -> None:
        ...


class LoggingNotifier:
    """Records booking confirmations in the application log."""

    def send_booking_confirmation(self, appointment: Appointment) -> None:
        logger.info(
            'Booking confirmed: appointment=%s customer=%s barber=%s salon=%s at %s',
            appointment.id,
            appointment.customer_id,
            appointment.barber_id,
            appointment.salon_id,
            appointment.appointment_date_time.isoformat(),
        )
