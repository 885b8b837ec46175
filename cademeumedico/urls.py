"""
URL configuration for the Cadê meu Médico? directory service.

The versioned API lives under ``/api/v1/``.  The Django admin is
exposed at ``/admin/`` and the OpenAPI documentation at ``/docs``
(Swagger UI) and ``/redoc``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Cadê meu Médico? API",
    default_version='v1',
    description="Directory of doctors, their specialties and the cities they practice in.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Django admin site (useful for curating reference data)
    path('admin/', admin.site.urls),
    path('api/v1/', include('directory.routers')),
    # Swagger and ReDoc
    path('docs', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

# JSON instead of Django's HTML page, e.g. for /api/v1/doctors/abc
handler404 = 'directory.views.errors.not_found'
