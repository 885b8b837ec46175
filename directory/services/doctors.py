import logging
from typing import Iterable, Optional

from django.db import IntegrityError, transaction
from django.db.models import Prefetch, QuerySet

from directory.exceptions import ConflictError, RecordNotFound
from directory.models import City, Doctor, DoctorCity, DoctorSpecialty, Specialty
from directory.services.links import reconcile_links, resolve_ids
from directory.services.reference import format_city, format_specialty
from directory.services.search import doctor_search_conditions

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Doctor not found'
CONFLICT_MESSAGE = 'Registration number already registered'


def _doctor_queryset(using: str) -> QuerySet:
    return Doctor.objects.using(using).prefetch_related(
        Prefetch('specialties', queryset=Specialty.objects.using(using).order_by('id')),
        Prefetch('cities', queryset=City.objects.using(using).order_by('id')),
    )


def _registration_taken(registration_number: str, *, exclude_pk: Optional[int], using: str) -> bool:
    qs = Doctor.objects.using(using).filter(registration_number=registration_number)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def _ensure_registration_free(registration_number: str, *, exclude_pk: Optional[int] = None, using: str) -> None:
    if _registration_taken(registration_number, exclude_pk=exclude_pk, using=using):
        logger.warning('Rejected duplicate registration number %s', registration_number)
        raise ConflictError(CONFLICT_MESSAGE)


def _save_scalars(doctor: Doctor, *, using: str) -> None:
    # savepoint so a losing uniqueness race leaves the outer transaction usable
    try:
        with transaction.atomic(using=using):
            doctor.save(using=using)
    except IntegrityError as exc:
        if _registration_taken(doctor.registration_number, exclude_pk=doctor.pk, using=using):
            logger.warning('Registration number %s taken concurrently', doctor.registration_number)
            raise ConflictError(CONFLICT_MESSAGE) from exc
        raise


def get_doctor(doctor_id: int, *, using: str = 'default') -> Doctor:
    doctor = _doctor_queryset(using).filter(pk=doctor_id).first()
    if doctor is None:
        raise RecordNotFound(NOT_FOUND_MESSAGE)
    return doctor


def list_doctors(*, offset: int, limit: int, using: str = 'default') -> tuple[list[Doctor], int]:
    # count and page are separate reads and may disagree under concurrent writes
    total = Doctor.objects.using(using).count()
    page = list(_doctor_queryset(using).order_by('id')[offset:offset + limit])
    return page, total


def search_doctors(*, name: Optional[str] = None, specialty: Optional[str] = None,
                   city: Optional[str] = None, using: str = 'default') -> list[Doctor]:
    conditions = doctor_search_conditions(name=name, specialty=specialty, city=city)
    return list(_doctor_queryset(using).filter(*conditions).order_by('id'))


def create_doctor(*, name: str, registration_number: str, specialty_ids: Iterable[int],
                  city_ids: Iterable[int], using: str = 'default') -> Doctor:
    with transaction.atomic(using=using):
        _ensure_registration_free(registration_number, using=using)
        specialty_ids = resolve_ids(Specialty, specialty_ids, field='specialties', using=using)
        city_ids = resolve_ids(City, city_ids, field='cities', using=using)

        doctor = Doctor(name=name, registration_number=registration_number)
        _save_scalars(doctor, using=using)
        reconcile_links(DoctorSpecialty, 'doctor', 'specialty', doctor, specialty_ids, using=using)
        reconcile_links(DoctorCity, 'doctor', 'city', doctor, city_ids, using=using)

    logger.info('Created doctor %s (CRM %s)', doctor.pk, registration_number)
    return get_doctor(doctor.pk, using=using)


def replace_doctor(doctor_id: int, *, name: str, registration_number: str, specialty_ids: Iterable[int],
                   city_ids: Iterable[int], using: str = 'default') -> Doctor:
    """Overwrite a doctor's fields and relink both relations to exactly the given ids.

    All checks run before the first write and everything happens in one
    transaction, so a failure leaves the previous state in place.
    """
    with transaction.atomic(using=using):
        doctor = Doctor.objects.using(using).select_for_update().filter(pk=doctor_id).first()
        if doctor is None:
            raise RecordNotFound(NOT_FOUND_MESSAGE)
        _ensure_registration_free(registration_number, exclude_pk=doctor.pk, using=using)
        specialty_ids = resolve_ids(Specialty, specialty_ids, field='specialties', using=using)
        city_ids = resolve_ids(City, city_ids, field='cities', using=using)

        doctor.name = name
        doctor.registration_number = registration_number
        _save_scalars(doctor, using=using)
        s_added, s_removed = reconcile_links(DoctorSpecialty, 'doctor', 'specialty', doctor, specialty_ids, using=using)
        c_added, c_removed = reconcile_links(DoctorCity, 'doctor', 'city', doctor, city_ids, using=using)

    logger.info(
        'Replaced doctor %s: specialties +%s -%s, cities +%s -%s',
        doctor.pk, sorted(s_added), sorted(s_removed), sorted(c_added), sorted(c_removed),
    )
    return get_doctor(doctor.pk, using=using)


def delete_doctor(doctor_id: int, *, using: str = 'default') -> None:
    with transaction.atomic(using=using):
        doctor = Doctor.objects.using(using).filter(pk=doctor_id).first()
        if doctor is None:
            raise RecordNotFound(NOT_FOUND_MESSAGE)
        # join rows cascade; specialties and cities stay
        doctor.delete(using=using)
    logger.info('Deleted doctor %s', doctor_id)


def format_doctor(d: Doctor) -> dict:
    return {
        'id': d.id,
        'name': d.name,
        'registrationNumber': d.registration_number,
        'specialties': [format_specialty(s) for s in d.specialties.all()],
        'cities': [format_city(c) for c in d.cities.all()],
    }
