"""
Django admin registrations for the clinic models.

Lets superusers inspect patients, doctors, appointments and user
accounts under ``/admin/`` during development.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import Appointment, Doctor, Patient, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'email', 'full_name', 'role', 'is_active', 'is_superuser')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'email', 'full_name')
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Clinic', {'fields': ('role', 'full_name')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'role', 'full_name', 'password1', 'password2'),
        }),
    )


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'age', 'gender', 'phone', 'email', 'created_at')
    list_filter = ('gender',)
    search_fields = ('name', 'phone', 'email')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'specialization', 'phone', 'email', 'active')
    list_filter = ('active', 'specialization')
    search_fields = ('name', 'specialization', 'email')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'appointment_date', 'status', 'patient', 'doctor')
    list_filter = ('status',)
    search_fields = ('patient__name', 'doctor__name')
    raw_id_fields = ('patient', 'doctor')
