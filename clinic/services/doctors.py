import logging
from typing import Optional

from django.db import transaction
from django.db.models import Count

from ..exceptions import Conflict, ResourceNotFound
from ..models import Doctor

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'id': 'id',
    'name': 'name',
    'specialization': 'specialization',
    'email': 'email',
    'phone': 'phone',
    'active': 'active',
}


def get_doctor(doctor_id: int) -> Doctor:
    doctor = Doctor.objects.filter(id=doctor_id).first()
    if doctor is None:
        raise ResourceNotFound('Doctor', doctor_id)
    return doctor


def list_doctors():
    return Doctor.objects.order_by('id')


def active_doctors():
    return Doctor.objects.active().order_by('id')


def search_doctors(*, name=None, specialization=None, active: Optional[bool] = None):
    return Doctor.objects.search(name=name, specialization=specialization, active=active)


def doctors_by_specialization(specialization: str):
    return Doctor.objects.with_specialization(specialization)


def specializations() -> list[str]:
    return Doctor.objects.specializations()


def _ensure_unique(email: str, phone: str, *, exclude_id=None, check_email=True, check_phone=True):
    qs = Doctor.objects.all()
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if check_email and qs.filter(email=email).exists():
        raise Conflict(f"Doctor with email '{email}' already exists")
    if check_phone and qs.filter(phone=phone).exists():
        raise Conflict(f"Doctor with phone '{phone}' already exists")


def create_doctor(*, name, specialization, phone, email, active: Optional[bool] = None) -> Doctor:
    with transaction.atomic():
        _ensure_unique(email, phone)
        doctor = Doctor.objects.create(
            name=name, specialization=specialization, phone=phone, email=email,
            active=True if active is None else active,
        )
    logger.info('doctor %s created (%s)', doctor.id, doctor.specialization)
    return doctor


def update_doctor(doctor_id: int, *, name, specialization, phone, email, active: Optional[bool] = None) -> Doctor:
    with transaction.atomic():
        doctor = get_doctor(doctor_id)
        _ensure_unique(
            email, phone, exclude_id=doctor.id,
            check_email=email != doctor.email,
            check_phone=phone != doctor.phone,
        )
        doctor.name = name
        doctor.specialization = specialization
        doctor.phone = phone
        doctor.email = email
        if active is not None:
            doctor.active = active
        doctor.save()
    logger.info('doctor %s updated', doctor.id)
    return doctor


def toggle_active(doctor_id: int) -> Doctor:
    with transaction.atomic():
        doctor = Doctor.objects.select_for_update().filter(id=doctor_id).first()
        if doctor is None:
            raise ResourceNotFound('Doctor', doctor_id)
        doctor.active = not doctor.active
        doctor.save(update_fields=['active'])
    logger.info('doctor %s active=%s', doctor.id, doctor.active)
    return doctor


def delete_doctor(doctor_id: int) -> None:
    with transaction.atomic():
        doctor = get_doctor(doctor_id)
        doctor.delete()
    logger.info('doctor %s deleted', doctor_id)


def doctor_stats() -> dict:
    rows = Doctor.objects.values('specialization').annotate(n=Count('id')).order_by('specialization')
    by_specialization = {r['specialization']: r['n'] for r in rows}
    return {
        'totalDoctors': Doctor.objects.count(),
        'activeDoctors': Doctor.objects.active().count(),
        'inactiveDoctors': Doctor.objects.inactive().count(),
        'totalSpecializations': len(by_specialization),
        'bySpecialization': by_specialization,
    }
