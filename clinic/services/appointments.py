"""
Appointment booking and lifecycle.

A doctor can hold at most one appointment per exact timestamp.  Booking
and rescheduling lock the doctor row, check the slot, then write; the
unique constraint on (doctor, appointment_date) backs the check up if
two writers still race past it.

Status is one of BOOKED, COMPLETED or CANCELLED.  Any status may move to
any other; only the value itself is validated.
"""
from __future__ import annotations

import logging
from datetime import datetime

from django.db import transaction

from ..exceptions import Conflict, InvalidArgument, InvalidState, ResourceNotFound
from ..models import Appointment, Doctor, Patient

logger = logging.getLogger(__name__)

VALID_STATUSES = (Appointment.STATUS_BOOKED, Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED)

SORT_FIELDS = {
    'id': 'id',
    'appointmentDate': 'appointment_date',
    'status': 'status',
    'patientId': 'patient_id',
    'doctorId': 'doctor_id',
}


def _base():
    return Appointment.objects.select_related('patient', 'doctor')


def get_appointment(appointment_id: int) -> Appointment:
    appt = _base().filter(id=appointment_id).first()
    if appt is None:
        raise ResourceNotFound('Appointment', appointment_id)
    return appt


def list_appointments():
    return _base().order_by('id')


def search_appointments(*, patient_id=None, doctor_id=None, status=None, start=None, end=None):
    return _base().search(patient_id=patient_id, doctor_id=doctor_id, status=status, start=start, end=end)


def todays_appointments(doctor_id: int | None = None):
    qs = _base().today()
    if doctor_id is not None:
        qs = qs.filter(doctor_id=doctor_id)
    return qs


def upcoming_appointments(*, patient_id: int | None = None, doctor_id: int | None = None):
    qs = _base().upcoming()
    if patient_id is not None:
        qs = qs.filter(patient_id=patient_id)
    if doctor_id is not None:
        qs = qs.filter(doctor_id=doctor_id)
    return qs


def book(patient_id: int, doctor_id: int, when: datetime) -> Appointment:
    with transaction.atomic():
        patient = Patient.objects.filter(id=patient_id).first()
        if patient is None:
            raise ResourceNotFound('Patient', patient_id)
        # Serialises concurrent bookings for the same doctor
        doctor = Doctor.objects.select_for_update().filter(id=doctor_id).first()
        if doctor is None:
            raise ResourceNotFound('Doctor', doctor_id)
        if not doctor.active:
            raise InvalidState(f"Doctor '{doctor.name}' is not currently available for appointments")
        if Appointment.objects.at_slot(doctor.id, when).exists():
            logger.info('slot taken: doctor=%s at %s', doctor.id, when.isoformat())
            raise Conflict('Doctor already has an appointment at this time - Please choose a different time slot')
        appt = Appointment.objects.create(
            patient=patient, doctor=doctor, appointment_date=when, status=Appointment.STATUS_BOOKED,
        )
    logger.info('appointment %s booked: patient=%s doctor=%s at %s', appt.id, patient.id, doctor.id, when.isoformat())
    return appt


def update_status(appointment_id: int, status: str) -> Appointment:
    normalized = (status or '').strip().upper()
    if normalized not in VALID_STATUSES:
        raise InvalidArgument(f"Invalid status: {status}. Valid values are: {', '.join(VALID_STATUSES)}")
    with transaction.atomic():
        appt = get_appointment(appointment_id)
        if appt.status != normalized:
            appt.status = normalized
            appt.save(update_fields=['status'])
    logger.info('appointment %s status=%s', appt.id, appt.status)
    return appt


def cancel(appointment_id: int) -> Appointment:
    return update_status(appointment_id, Appointment.STATUS_CANCELLED)


def reschedule(appointment_id: int, when: datetime) -> Appointment:
    with transaction.atomic():
        appt = get_appointment(appointment_id)
        Doctor.objects.select_for_update().filter(id=appt.doctor_id).first()
        if Appointment.objects.at_slot(appt.doctor_id, when).exclude(id=appt.id).exists():
            logger.info('reschedule of %s refused: slot taken at %s', appt.id, when.isoformat())
            raise Conflict('Doctor already has an appointment at this time - Please choose a different time slot')
        appt.appointment_date = when
        appt.save(update_fields=['appointment_date'])
    logger.info('appointment %s rescheduled to %s', appt.id, when.isoformat())
    return appt


def delete_appointment(appointment_id: int) -> None:
    with transaction.atomic():
        appt = get_appointment(appointment_id)
        appt.delete()
    logger.info('appointment %s deleted', appointment_id)


def count_all() -> int:
    return Appointment.objects.count()


def count_by_status(status: str) -> int:
    return Appointment.objects.with_status(status).count()


def count_today() -> int:
    return Appointment.objects.today().count()


def count_by_doctor(doctor_id: int) -> int:
    return Appointment.objects.filter(doctor_id=doctor_id).count()


def count_by_patient(patient_id: int) -> int:
    return Appointment.objects.filter(patient_id=patient_id).count()


def appointment_stats() -> dict:
    return {
        'totalAppointments': count_all(),
        'bookedAppointments': count_by_status(Appointment.STATUS_BOOKED),
        'completedAppointments': count_by_status(Appointment.STATUS_COMPLETED),
        'cancelledAppointments': count_by_status(Appointment.STATUS_CANCELLED),
        'todaysAppointments': count_today(),
    }
