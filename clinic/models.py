"""
Database models for the MHOMS services backend.

Each model owns one table and carries a custom QuerySet holding the
lookups the services need (search criteria, today's/upcoming
appointments, counts).  Services never build raw queries themselves;
they go through these managers.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone


phone_validator = RegexValidator(r'^\d{10}$', 'Phone must be 10 digits')


class User(AbstractUser):
    """Authentication principal.

    Roles are fixed at registration: 'ADMIN', 'DOCTOR' or 'PATIENT'.
    The password column only ever holds a salted hash produced by
    Django's password hashers.
    """
    ROLE_ADMIN = 'ADMIN'
    ROLE_DOCTOR = 'DOCTOR'
    ROLE_PATIENT = 'PATIENT'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_PATIENT, 'Patient'),
    ]
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class PatientQuerySet(models.QuerySet):
    def search(self, *, name=None, gender=None, min_age=None, max_age=None):
        qs = self
        if name:
            qs = qs.filter(name__icontains=name)
        if gender:
            qs = qs.filter(gender__iexact=gender)
        if min_age is not None:
            qs = qs.filter(age__gte=min_age)
        if max_age is not None:
            qs = qs.filter(age__lte=max_age)
        return qs

    def with_gender(self, gender: str):
        return self.filter(gender__iexact=gender)

    def created_today(self):
        return self.filter(created_at__date=timezone.localdate())


class Patient(models.Model):
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=32)
    phone = models.CharField(max_length=10, unique=True, validators=[phone_validator])
    email = models.EmailField(unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PatientQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.name} (#{self.id})"


class DoctorQuerySet(models.QuerySet):
    def search(self, *, name=None, specialization=None, active=None):
        qs = self
        if name:
            qs = qs.filter(name__icontains=name)
        if specialization:
            qs = qs.filter(specialization__icontains=specialization)
        if active is not None:
            qs = qs.filter(active=active)
        return qs

    def active(self):
        return self.filter(active=True)

    def inactive(self):
        return self.filter(active=False)

    def with_specialization(self, specialization: str):
        return self.filter(specialization__iexact=specialization)

    def specializations(self) -> list[str]:
        return list(
            self.order_by('specialization').values_list('specialization', flat=True).distinct()
        )


class Doctor(models.Model):
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, unique=True)
    email = models.EmailField(unique=True)
    # Availability for new bookings; filtered on frequently
    active = models.BooleanField(default=True, db_index=True)

    objects = DoctorQuerySet.as_manager()

    def __str__(self) -> str:
        return f"Dr. {self.name} ({self.specialization})"


class AppointmentQuerySet(models.QuerySet):
    def at_slot(self, doctor_id: int, when):
        return self.filter(doctor_id=doctor_id, appointment_date=when)

    def with_status(self, status: str):
        return self.filter(status__iexact=status)

    def search(self, *, patient_id=None, doctor_id=None, status=None, start=None, end=None):
        qs = self
        if patient_id is not None:
            qs = qs.filter(patient_id=patient_id)
        if doctor_id is not None:
            qs = qs.filter(doctor_id=doctor_id)
        if status:
            qs = qs.filter(status__iexact=status)
        if start is not None:
            qs = qs.filter(appointment_date__gte=start)
        if end is not None:
            qs = qs.filter(appointment_date__lte=end)
        return qs

    def today(self):
        return self.filter(appointment_date__date=timezone.localdate()).order_by('appointment_date')

    def upcoming(self):
        return self.filter(
            appointment_date__gt=timezone.now(), status=Appointment.STATUS_BOOKED
        ).order_by('appointment_date')


class Appointment(models.Model):
    STATUS_BOOKED = 'BOOKED'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_BOOKED, 'Booked'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='appointments')
    appointment_date = models.DateTimeField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_BOOKED, db_index=True)

    objects = AppointmentQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'appointment_date'], name='uniq_doctor_appointment_date'
            ),
        ]
        indexes = [
            models.Index(fields=['patient', 'appointment_date'], name='appt_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"appt {self.id} d={self.doctor_id} p={self.patient_id} @ {self.appointment_date:%Y-%m-%d %H:%M}"
