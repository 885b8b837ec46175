"""
Doctor endpoints.

``/doctors`` lists (paginated) and creates, ``/doctors/<id>`` reads,
replaces and deletes, ``/search/doctors`` filters by name, specialty
and city.  Handlers only validate input and translate service
outcomes; domain errors raised by the services are rendered by
``directory.exceptions.api_exception_handler``.
"""
from __future__ import annotations

from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from directory.exceptions import RecordNotFound
from directory.serializers.doctor import (
    DoctorListQuerySerializer,
    DoctorSearchQuerySerializer,
    DoctorWriteSerializer,
)
from directory.services.doctors import (
    create_doctor,
    delete_doctor,
    format_doctor,
    get_doctor,
    list_doctors,
    replace_doctor,
    search_doctors,
)
from directory.services.search import page_offset, total_pages


def _write_kwargs(data: dict) -> dict:
    return {
        'name': data['name'],
        'registration_number': data['registrationNumber'],
        'specialty_ids': data['specialties'],
        'city_ids': data['cities'],
    }


@swagger_auto_schema(method='get', query_serializer=DoctorListQuerySerializer)
@swagger_auto_schema(method='post', request_body=DoctorWriteSerializer)
@api_view(['GET', 'POST'])
def doctors(request):
    if request.method == 'GET':
        q = DoctorListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        page = q.validated_data['page']
        limit = q.validated_data['limit']
        rows, total = list_doctors(offset=page_offset(page, limit), limit=limit)
        return Response({
            'data': [format_doctor(d) for d in rows],
            'meta': {'page': page, 'total': total, 'total_pages': total_pages(total, limit)},
        })
    # POST
    body = DoctorWriteSerializer(data=request.data)
    body.is_valid(raise_exception=True)
    doctor = create_doctor(**_write_kwargs(body.validated_data))
    return Response(format_doctor(doctor), status=status.HTTP_201_CREATED)


@swagger_auto_schema(method='put', request_body=DoctorWriteSerializer)
@api_view(['GET', 'PUT', 'DELETE'])
def doctor_detail(request, pk: int):
    if request.method == 'GET':
        return Response(format_doctor(get_doctor(pk)))
    if request.method == 'PUT':
        body = DoctorWriteSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        doctor = replace_doctor(pk, **_write_kwargs(body.validated_data))
        return Response(format_doctor(doctor))
    # DELETE answers 404 without a body
    try:
        delete_doctor(pk)
    except RecordNotFound:
        return Response(status=status.HTTP_404_NOT_FOUND)
    return Response(status=status.HTTP_204_NO_CONTENT)


@swagger_auto_schema(method='get', query_serializer=DoctorSearchQuerySerializer)
@api_view(['GET'])
def search(request):
    q = DoctorSearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    found = search_doctors(
        name=q.validated_data.get('name'),
        specialty=q.validated_data.get('specialty'),
        city=q.validated_data.get('city'),
    )
    return Response([format_doctor(d) for d in found])
