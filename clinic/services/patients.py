import logging

from django.db import transaction

from ..exceptions import Conflict, ResourceNotFound
from ..models import Patient

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'id': 'id',
    'name': 'name',
    'age': 'age',
    'gender': 'gender',
    'email': 'email',
    'phone': 'phone',
    'createdAt': 'created_at',
}


def get_patient(patient_id: int) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if patient is None:
        raise ResourceNotFound('Patient', patient_id)
    return patient


def list_patients():
    return Patient.objects.order_by('id')


def search_patients(*, name=None, gender=None, min_age=None, max_age=None):
    return Patient.objects.search(name=name, gender=gender, min_age=min_age, max_age=max_age)


def _ensure_unique(email: str, phone: str, *, exclude_id=None, check_email=True, check_phone=True):
    qs = Patient.objects.all()
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if check_email and qs.filter(email=email).exists():
        raise Conflict(f"Patient with email '{email}' already exists")
    if check_phone and qs.filter(phone=phone).exists():
        raise Conflict(f"Patient with phone '{phone}' already exists")


def create_patient(*, name, age, gender, phone, email) -> Patient:
    with transaction.atomic():
        _ensure_unique(email, phone)
        patient = Patient.objects.create(name=name, age=age, gender=gender, phone=phone, email=email)
    logger.info('patient %s created', patient.id)
    return patient


def update_patient(patient_id: int, *, name, age, gender, phone, email) -> Patient:
    with transaction.atomic():
        patient = get_patient(patient_id)
        _ensure_unique(
            email, phone, exclude_id=patient.id,
            check_email=email != patient.email,
            check_phone=phone != patient.phone,
        )
        patient.name = name
        patient.age = age
        patient.gender = gender
        patient.phone = phone
        patient.email = email
        patient.save()
    logger.info('patient %s updated', patient.id)
    return patient


def delete_patient(patient_id: int) -> None:
    with transaction.atomic():
        patient = get_patient(patient_id)
        patient.delete()
    logger.info('patient %s deleted', patient_id)


def patient_stats() -> dict:
    return {
        'totalPatients': Patient.objects.count(),
        'malePatients': Patient.objects.with_gender('Male').count(),
        'femalePatients': Patient.objects.with_gender('Female').count(),
        'patientsCreatedToday': Patient.objects.created_today().count(),
    }
