"""
Administrative dashboard endpoints.

Aggregate counts across patients, doctors, appointments and user
accounts.  Only ADMIN may call these (route policy).
"""
from __future__ import annotations

from django.db.models import Count
from django.utils import timezone
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..models import Appointment, User
from ..services import appointments, doctors, patients


def _user_counts() -> dict:
    by_role = dict(User.objects.values_list('role').annotate(n=Count('id')))
    return {
        'totalUsers': sum(by_role.values()),
        'adminUsers': by_role.get(User.ROLE_ADMIN, 0),
        'doctorUsers': by_role.get(User.ROLE_DOCTOR, 0),
        'patientUsers': by_role.get(User.ROLE_PATIENT, 0),
    }


@api_view(['GET'])
def dashboard_stats(request):
    """Return every counter the admin dashboard shows, plus ``generatedAt``."""
    data: dict[str, object] = {}
    data.update(patients.patient_stats())
    doctor = doctors.doctor_stats()
    data.update({k: doctor[k] for k in ('totalDoctors', 'activeDoctors', 'inactiveDoctors')})
    data.update(appointments.appointment_stats())
    data['upcomingAppointments'] = appointments.upcoming_appointments().count()
    data.update(_user_counts())
    data['generatedAt'] = timezone.localtime().strftime('%Y-%m-%dT%H:%M:%S')
    return Response(data)


@api_view(['GET'])
def dashboard_summary(request):
    return Response({
        'totalPatients': patients.list_patients().count(),
        'activeDoctors': doctors.active_doctors().count(),
        'todaysAppointments': appointments.count_today(),
        'pendingAppointments': appointments.count_by_status(Appointment.STATUS_BOOKED),
    })
