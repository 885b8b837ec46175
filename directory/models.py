"""
Database models for the practitioner directory.

The directory holds three entities: specialties and cities are long
lived reference data, doctors are created, replaced and deleted
through the API.  A doctor is linked to specialties and cities through
explicit join models so that the links can be reconciled row by row
(see :mod:`directory.services.links`) instead of relying on implicit
many-to-many bookkeeping.
"""
from __future__ import annotations

from django.db import models


class Specialty(models.Model):
    """A named medical specialization, identified by its name."""
    name = models.CharField(max_length=120)

    class Meta:
        ordering = ['id']
        verbose_name_plural = 'specialties'
        constraints = [
            models.UniqueConstraint(fields=['name'], name='unique_specialty_name'),
        ]

    def __str__(self) -> str:
        return self.name


class City(models.Model):
    """A municipality; its identity is the ``(name, state)`` pair."""
    name = models.CharField(max_length=120)
    # Two-letter federative unit code, e.g. "SP"
    state = models.CharField(max_length=2)

    class Meta:
        ordering = ['id']
        verbose_name_plural = 'cities'
        constraints = [
            models.UniqueConstraint(fields=['name', 'state'], name='unique_city_name_state'),
        ]

    def __str__(self) -> str:
        return f"{self.name}/{self.state}"


class Doctor(models.Model):
    """A practitioner record.

    ``registration_number`` is the professional council registration
    (CRM) and is unique across the directory.  The minimum of one
    specialty and one city is enforced by the request serializer, not
    here.
    """
    name = models.CharField(max_length=255)
    registration_number = models.CharField(max_length=32)
    specialties = models.ManyToManyField(Specialty, through='DoctorSpecialty', related_name='doctors')
    cities = models.ManyToManyField(City, through='DoctorCity', related_name='doctors')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['registration_number'], name='unique_doctor_registration_number'),
        ]
        indexes = [
            models.Index(fields=['name'], name='doctor_name_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.name} (CRM {self.registration_number})"


class DoctorSpecialty(models.Model):
    """Join row linking a doctor to one specialty."""
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='specialty_links')
    specialty = models.ForeignKey(Specialty, on_delete=models.CASCADE, related_name='doctor_links')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'specialty'], name='unique_doctor_specialty'),
        ]

    def __str__(self) -> str:
        return f"doctor={self.doctor_id} specialty={self.specialty_id}"


class DoctorCity(models.Model):
    """Join row linking a doctor to one city."""
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='city_links')
    city = models.ForeignKey(City, on_delete=models.CASCADE, related_name='doctor_links')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'city'], name='unique_doctor_city'),
        ]

    def __str__(self) -> str:
        return f"doctor={self.doctor_id} city={self.city_id}"
