"""
URL mappings for the clinic API.

Paths carry no ``/api`` prefix and no trailing slash; the access policy
in ``clinic.permissions`` is written against exactly these paths.
"""
from django.urls import include, path

from .auth_views import login_view, refresh_view, register_view
from .views import appointments, dashboard, doctors, health, patients

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('health', health.health, name='health'),
    # Authentication
    path('auth/register', register_view, name='auth-register'),
    path('auth/login', login_view, name='auth-login'),
    path('auth/refresh', refresh_view, name='auth-refresh'),
    # Patients
    path('patients', patients.patients, name='patients'),
    path('patients/page', patients.patients_page, name='patients-page'),
    path('patients/search', patients.patients_search, name='patients-search'),
    path('patients/stats', patients.patients_stats, name='patients-stats'),
    path('patients/<int:pk>', patients.patient_detail, name='patient-detail'),
    # Doctors
    path('doctors', doctors.doctors, name='doctors'),
    path('doctors/page', doctors.doctors_page, name='doctors-page'),
    path('doctors/search', doctors.doctors_search, name='doctors-search'),
    path('doctors/specializations', doctors.doctors_specializations, name='doctors-specializations'),
    path('doctors/specialization/<str:specialization>', doctors.doctors_by_specialization, name='doctors-by-specialization'),
    path('doctors/active', doctors.doctors_active, name='doctors-active'),
    path('doctors/stats', doctors.doctors_stats, name='doctors-stats'),
    path('doctors/<int:pk>', doctors.doctor_detail, name='doctor-detail'),
    path('doctors/<int:pk>/toggle-status', doctors.doctor_toggle_status, name='doctor-toggle-status'),
    # Appointments
    path('appointments', appointments.appointments, name='appointments'),
    path('appointments/page', appointments.appointments_page, name='appointments-page'),
    path('appointments/search', appointments.appointments_search, name='appointments-search'),
    path('appointments/today', appointments.appointments_today, name='appointments-today'),
    path('appointments/today/doctor/<int:doctor_id>', appointments.appointments_today, name='appointments-today-doctor'),
    path('appointments/upcoming', appointments.appointments_upcoming, name='appointments-upcoming'),
    path('appointments/upcoming/patient/<int:patient_id>', appointments.appointments_upcoming_for_patient, name='appointments-upcoming-patient'),
    path('appointments/upcoming/doctor/<int:doctor_id>', appointments.appointments_upcoming_for_doctor, name='appointments-upcoming-doctor'),
    path('appointments/stats', appointments.appointments_stats, name='appointments-stats'),
    path('appointments/<int:pk>', appointments.appointment_detail, name='appointment-detail'),
    path('appointments/<int:pk>/status', appointments.appointment_status, name='appointment-status'),
    path('appointments/<int:pk>/reschedule', appointments.appointment_reschedule, name='appointment-reschedule'),
    path('appointments/<int:pk>/cancel', appointments.appointment_cancel, name='appointment-cancel'),
    # Dashboard
    path('dashboard/stats', dashboard.dashboard_stats, name='dashboard-stats'),
    path('dashboard/summary', dashboard.dashboard_summary, name='dashboard-summary'),
]
