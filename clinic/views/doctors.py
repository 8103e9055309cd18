from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.common import PageQuerySerializer
from ..serializers.doctor import DoctorInputSerializer, DoctorSearchQuerySerializer, DoctorSerializer
from ..services import doctors as svc
from ..services.pagination import paginate


def _many(rows):
    return DoctorSerializer(rows, many=True).data


@api_view(['GET', 'POST'])
def doctors(request):
    if request.method == 'POST':
        s = DoctorInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = svc.create_doctor(**s.validated_data)
        return Response(DoctorSerializer(doctor).data, status=status.HTTP_201_CREATED)
    return Response(_many(svc.list_doctors()))


@api_view(['GET'])
def doctors_page(request):
    q = PageQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    return Response(paginate(svc.list_doctors(), q.page_request(), svc.SORT_FIELDS, _many))


@api_view(['GET'])
def doctors_search(request):
    q = DoctorSearchQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = svc.search_doctors(
        name=vd.get('name'),
        specialization=vd.get('specialization'),
        active=vd.get('active'),
    )
    return Response(paginate(qs, q.page_request(), svc.SORT_FIELDS, _many))


@api_view(['GET'])
def doctors_specializations(request):
    return Response(svc.specializations())


@api_view(['GET'])
def doctors_by_specialization(request, specialization: str):
    q = PageQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    qs = svc.doctors_by_specialization(specialization)
    return Response(paginate(qs, q.page_request(), svc.SORT_FIELDS, _many))


@api_view(['GET'])
def doctors_active(request):
    return Response(_many(svc.active_doctors()))


@api_view(['GET'])
def doctors_stats(request):
    return Response(svc.doctor_stats())


@api_view(['PATCH'])
def doctor_toggle_status(request, pk: int):
    return Response(DoctorSerializer(svc.toggle_active(pk)).data)


@api_view(['GET', 'PUT', 'DELETE'])
def doctor_detail(request, pk: int):
    if request.method == 'PUT':
        s = DoctorInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = svc.update_doctor(pk, **s.validated_data)
        return Response(DoctorSerializer(doctor).data)
    if request.method == 'DELETE':
        svc.delete_doctor(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(DoctorSerializer(svc.get_doctor(pk)).data)
