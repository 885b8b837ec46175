"""Directory application for the Cadê meu Médico? service.

This package contains models, serializers, services, views and route
registrations for the doctor, specialty and city catalog.
"""
