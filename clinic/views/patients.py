"""
Patient record views.

Reads are open to ADMIN and DOCTOR, writes to ADMIN only; both are
enforced by the route policy before these functions run.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.common import PageQuerySerializer
from ..serializers.patient import PatientInputSerializer, PatientSearchQuerySerializer, PatientSerializer
from ..services import patients as svc
from ..services.pagination import paginate


def _many(rows):
    return PatientSerializer(rows, many=True).data


@api_view(['GET', 'POST'])
def patients(request):
    if request.method == 'POST':
        s = PatientInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = svc.create_patient(**s.validated_data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)
    return Response(_many(svc.list_patients()))


@api_view(['GET'])
def patients_page(request):
    q = PageQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    return Response(paginate(svc.list_patients(), q.page_request(), svc.SORT_FIELDS, _many))


@api_view(['GET'])
def patients_search(request):
    q = PatientSearchQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = svc.search_patients(
        name=vd.get('name'),
        gender=vd.get('gender'),
        min_age=vd.get('minAge'),
        max_age=vd.get('maxAge'),
    )
    return Response(paginate(qs, q.page_request(), svc.SORT_FIELDS, _many))


@api_view(['GET'])
def patients_stats(request):
    return Response(svc.patient_stats())


@api_view(['GET', 'PUT', 'DELETE'])
def patient_detail(request, pk: int):
    if request.method == 'PUT':
        s = PatientInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = svc.update_patient(pk, **s.validated_data)
        return Response(PatientSerializer(patient).data)
    if request.method == 'DELETE':
        svc.delete_patient(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(PatientSerializer(svc.get_patient(pk)).data)
