"""
URL mappings for the directory API.

Mounted under ``/api/v1/`` by the project URLconf.  Trailing slashes
are deliberately omitted (``APPEND_SLASH = False``).
"""
from django.urls import path

from .views import doctors, health, reference

urlpatterns = [
    path('health', health.health, name='health'),
    # Reference data
    path('specialties', reference.specialties, name='specialty-list'),
    path('cities', reference.cities, name='city-list'),
    # Doctors
    path('doctors', doctors.doctors, name='doctor-list'),
    path('doctors/<int:pk>', doctors.doctor_detail, name='doctor-detail'),
    path('search/doctors', doctors.search, name='doctor-search'),
]
