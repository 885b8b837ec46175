"""
Read-only listings of the reference data (specialties and cities).
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from directory.services.reference import format_city, format_specialty, list_cities, list_specialties


@api_view(['GET'])
def specialties(request):
    return Response([format_specialty(s) for s in list_specialties()])


@api_view(['GET'])
def cities(request):
    return Response([format_city(c) for c in list_cities()])
