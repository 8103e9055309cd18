"""
Appointment views.

Booking and rescheduling accept their parameters either in the JSON body
or in the query string (body wins when both are present).
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.appointment import (
    AppointmentSearchQuerySerializer,
    AppointmentSerializer,
    BookAppointmentSerializer,
    RescheduleSerializer,
    StatusUpdateSerializer,
)
from ..serializers.common import PageQuerySerializer
from ..services import appointments as svc
from ..services.pagination import paginate


def _many(rows):
    return AppointmentSerializer(rows, many=True).data


def _params(request) -> dict:
    merged = request.query_params.dict()
    body = request.data
    if hasattr(body, 'dict'):
        body = body.dict()
    if isinstance(body, dict):
        merged.update(body)
    return merged


@api_view(['GET', 'POST'])
def appointments(request):
    if request.method == 'POST':
        s = BookAppointmentSerializer(data=_params(request))
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        appt = svc.book(vd['patientId'], vd['doctorId'], vd['appointmentDate'])
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_201_CREATED)
    return Response(_many(svc.list_appointments()))


@api_view(['GET'])
def appointments_page(request):
    q = PageQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    req = q.page_request(sort_by='appointmentDate', sort_dir='desc')
    return Response(paginate(svc.list_appointments(), req, svc.SORT_FIELDS, _many))


@api_view(['GET'])
def appointments_search(request):
    q = AppointmentSearchQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = svc.search_appointments(
        patient_id=vd.get('patientId'),
        doctor_id=vd.get('doctorId'),
        status=vd.get('status'),
        start=vd.get('startDate'),
        end=vd.get('endDate'),
    )
    req = q.page_request(sort_by='appointmentDate', sort_dir='desc')
    return Response(paginate(qs, req, svc.SORT_FIELDS, _many))


@api_view(['GET'])
def appointments_today(request, doctor_id: int | None = None):
    return Response(_many(svc.todays_appointments(doctor_id)))


@api_view(['GET'])
def appointments_upcoming(request):
    q = PageQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    req = q.page_request(sort_by='appointmentDate', sort_dir='asc')
    return Response(paginate(svc.upcoming_appointments(), req, svc.SORT_FIELDS, _many))


@api_view(['GET'])
def appointments_upcoming_for_patient(request, patient_id: int):
    return Response(_many(svc.upcoming_appointments(patient_id=patient_id)))


@api_view(['GET'])
def appointments_upcoming_for_doctor(request, doctor_id: int):
    return Response(_many(svc.upcoming_appointments(doctor_id=doctor_id)))


@api_view(['GET'])
def appointments_stats(request):
    data = svc.appointment_stats()
    # Optional per-doctor / per-patient counts
    doctor_id = request.query_params.get('doctorId')
    patient_id = request.query_params.get('patientId')
    if doctor_id and doctor_id.isdigit():
        data['doctorAppointments'] = svc.count_by_doctor(int(doctor_id))
    if patient_id and patient_id.isdigit():
        data['patientAppointments'] = svc.count_by_patient(int(patient_id))
    return Response(data)


@api_view(['GET', 'DELETE'])
def appointment_detail(request, pk: int):
    if request.method == 'DELETE':
        svc.delete_appointment(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(AppointmentSerializer(svc.get_appointment(pk)).data)


@api_view(['PUT'])
def appointment_status(request, pk: int):
    s = StatusUpdateSerializer(data=_params(request))
    s.is_valid(raise_exception=True)
    return Response(AppointmentSerializer(svc.update_status(pk, s.validated_data['status'])).data)


@api_view(['PUT'])
def appointment_reschedule(request, pk: int):
    s = RescheduleSerializer(data=_params(request))
    s.is_valid(raise_exception=True)
    return Response(AppointmentSerializer(svc.reschedule(pk, s.validated_data['newDate'])).data)


@api_view(['PUT'])
def appointment_cancel(request, pk: int):
    return Response(AppointmentSerializer(svc.cancel(pk)).data)
