"""Booking error taxonomy.

Each error carries the HTTP status and the user-facing detail the routes
return for it. ``AlreadyBooked`` is the expected outcome for every loser of a
reservation race and is kept apart from storage failures, which propagate as
``SQLAlchemyError``.
"""

from fastapi import status


class BookingError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = 'Unable to complete the booking request.'

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class TooSoon(BookingError):
    detail = 'Appointments must be booked at least 12 hours in advance.'


class ValidationFailed(BookingError):
    detail = 'Invalid booking request.'


class SlotNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = 'Schedule slot not found or could not be created.'


class AlreadyBooked(BookingError):
    status_code = status.HTTP_409_CONFLICT
    detail = 'This time slot is already booked.'


class SlotMismatch(BookingError):
    status_code = status.HTTP_409_CONFLICT
    detail = 'Unable to book this time slot. Please try again.'


class SlotInUse(BookingError):
    status_code = status.HTTP_409_CONFLICT
    detail = 'Cannot delete a booked schedule slot.'


class SlotAlreadyExists(BookingError):
    status_code = status.HTTP_409_CONFLICT
    detail = 'A schedule slot already exists for this staff member at this time.'


class SlotNotReserved(BookingError):
    status_code = status.HTTP_409_CONFLICT
    detail = 'Schedule slot is not reserved.'


class AppointmentNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = 'Appointment not found.'


class SalonNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = 'Salon not found.'


class NoStaffAvailable(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = 'No barbers or staff found for this salon.'
