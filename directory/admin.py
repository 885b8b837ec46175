"""
Django admin registrations for the directory models.

Lets staff curate the reference data and inspect doctors via the
``/admin/`` URL.  Doctor links are edited inline through the join
models.
"""

from django.contrib import admin

from .models import City, Doctor, DoctorCity, DoctorSpecialty, Specialty


@admin.register(Specialty)
class SpecialtyAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'state')
    list_filter = ('state',)
    search_fields = ('name',)


class DoctorSpecialtyInline(admin.TabularInline):
    model = DoctorSpecialty
    extra = 0


class DoctorCityInline(admin.TabularInline):
    model = DoctorCity
    extra = 0


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'registration_number', 'created_at')
    search_fields = ('name', 'registration_number', 'specialties__name', 'cities__name')
    inlines = (DoctorSpecialtyInline, DoctorCityInline)
