from rest_framework import serializers

from ..models import Appointment
from .common import ID_MAX, PageQuerySerializer
from .doctor import DoctorSerializer
from .patient import PatientSerializer


class AppointmentSerializer(serializers.ModelSerializer):
    patient = PatientSerializer(read_only=True)
    doctor = DoctorSerializer(read_only=True)
    appointmentDate = serializers.DateTimeField(source='appointment_date', read_only=True)

    class Meta:
        model = Appointment
        fields = ['id', 'patient', 'doctor', 'appointmentDate', 'status']
        read_only_fields = fields


class BookAppointmentSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, max_value=ID_MAX)
    doctorId = serializers.IntegerField(min_value=1, max_value=ID_MAX)
    appointmentDate = serializers.DateTimeField()


class StatusUpdateSerializer(serializers.Serializer):
    # Membership is checked by the service so the error names valid values
    status = serializers.CharField()


class RescheduleSerializer(serializers.Serializer):
    newDate = serializers.DateTimeField()


class AppointmentSearchQuerySerializer(PageQuerySerializer):
    patientId = serializers.IntegerField(required=False, min_value=1, max_value=ID_MAX)
    doctorId = serializers.IntegerField(required=False, min_value=1, max_value=ID_MAX)
    status = serializers.CharField(required=False, allow_blank=True)
    startDate = serializers.DateTimeField(required=False)
    endDate = serializers.DateTimeField(required=False)
