import logging
from typing import Any, Dict, Optional, Tuple, Type

from django.db import IntegrityError, models, transaction

from directory.models import City, Specialty

logger = logging.getLogger(__name__)

SEED_SPECIALTIES = ['Cardiologia', 'Dermatologia', 'Pediatria', 'Clínica Geral']
SEED_CITIES = [
    {'name': 'São Paulo', 'state': 'SP'},
    {'name': 'Apucarana', 'state': 'PR'},
    {'name': 'Rio de Janeiro', 'state': 'RJ'},
]


def upsert_by_natural_key(model: Type[models.Model], natural_key: Dict[str, Any],
                          attributes: Optional[Dict[str, Any]] = None, *, using: str = 'default') -> Tuple[models.Model, bool]:
    """Find a reference row by its natural key or insert it.

    Existing rows are returned untouched.  If a concurrent insert wins
    the race the unique constraint fires and the winner is re-read.
    """
    manager = model.objects.using(using)
    try:
        with transaction.atomic(using=using):
            return manager.get_or_create(**natural_key, defaults=attributes or {})
    except IntegrityError:
        return manager.get(**natural_key), False


def list_specialties(*, using: str = 'default') -> list[Specialty]:
    return list(Specialty.objects.using(using).order_by('id'))


def list_cities(*, using: str = 'default') -> list[City]:
    return list(City.objects.using(using).order_by('id'))


def format_specialty(s: Specialty) -> dict:
    return {'id': s.id, 'name': s.name}


def format_city(c: City) -> dict:
    return {'id': c.id, 'name': c.name, 'state': c.state}


def seed_reference_data(*, using: str = 'default') -> Dict[str, int]:
    """Ensure the fixed specialty and city lists exist; safe to re-run."""
    created = {'specialties': 0, 'cities': 0}
    for name in SEED_SPECIALTIES:
        _, was_created = upsert_by_natural_key(Specialty, {'name': name}, using=using)
        created['specialties'] += int(was_created)
    for city in SEED_CITIES:
        _, was_created = upsert_by_natural_key(City, {'name': city['name'], 'state': city['state']}, using=using)
        created['cities'] += int(was_created)
    logger.info('Seeded reference data: %(specialties)d specialties, %(cities)d cities created', created)
    return created
