import html

import bleach
from django.conf import settings
from rest_framework import serializers


class DoctorWriteSerializer(serializers.Serializer):
    """Body of ``POST /doctors`` and ``PUT /doctors/<id>``."""
    name = serializers.CharField(min_length=3, max_length=255)
    registrationNumber = serializers.CharField(min_length=4, max_length=32)
    specialties = serializers.ListField(
        child=serializers.IntegerField(min_value=1), min_length=1,
        error_messages={'min_length': 'At least one specialty is required'},
    )
    cities = serializers.ListField(
        child=serializers.IntegerField(min_value=1), min_length=1,
        error_messages={'min_length': 'At least one city is required'},
    )

    def to_internal_value(self, data):
        # older clients still send the council registration as ``crm``
        if hasattr(data, 'get') and 'registrationNumber' not in data and 'crm' in data:
            data = {**data, 'registrationNumber': data.get('crm')}
        return super().to_internal_value(data)

    def validate_name(self, v):
        # drop markup but keep literal characters such as "&" and "<"
        v = html.unescape(bleach.clean((v or '').strip(), strip=True)).strip()
        if len(v) < 3:
            raise serializers.ValidationError('Name must have at least 3 characters')
        return v

    def validate_registrationNumber(self, v):
        # opaque identifier, stored exactly as sent
        v = (v or '').strip()
        if len(v) < 4:
            raise serializers.ValidationError('Registration number must have at least 4 characters')
        return v


class DoctorListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=settings.PAGE_SIZE_MAX, default=10)


class DoctorSearchQuerySerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    specialty = serializers.CharField(required=False, allow_blank=True, max_length=120)
    city = serializers.CharField(required=False, allow_blank=True, max_length=120)
