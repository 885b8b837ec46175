"""
Filter and pagination helpers for doctor queries.

Each optional search term contributes one condition; the conditions
are AND-ed by passing them together to ``QuerySet.filter``.  Relation
terms are existence-quantified subqueries over the join models, so a
doctor matches when *at least one* linked specialty/city contains the
term and is never duplicated by the join.

Matching is a case-insensitive substring test: both the column and the
term are lower-cased before a plain ``contains``.  SQLite's own
``LOWER``/``LIKE`` only fold ASCII letters, so on SQLite the column is
lower-cased by a Python function registered per connection (see
``register_sqlite_functions``); accented letters such as "Ã" and "É"
then fold the same way on every backend.  Matching stays
accent-sensitive.
"""
import math
from typing import Optional

from django.db.models import Exists, OuterRef
from django.db.models.functions import Lower
from django.db.models.lookups import Contains

from directory.models import DoctorCity, DoctorSpecialty

SQLITE_LOWER_FUNCTION = 'DIRECTORY_UNICODE_LOWER'


def _unicode_lower(value):
    return value.lower() if value is not None else None


def register_sqlite_functions(sender, connection, **kwargs) -> None:
    """``connection_created`` receiver installing the Unicode lower-case function."""
    if connection.vendor == 'sqlite':
        connection.connection.create_function(SQLITE_LOWER_FUNCTION, 1, _unicode_lower, deterministic=True)


class UnicodeLower(Lower):
    def as_sqlite(self, compiler, connection, **extra_context):
        return super().as_sql(compiler, connection, function=SQLITE_LOWER_FUNCTION, **extra_context)


def _clean(term: Optional[str]) -> Optional[str]:
    term = (term or '').strip()
    return term.lower() or None


def _contains(field: str, term: str) -> Contains:
    return Contains(UnicodeLower(field), term)


def doctor_search_conditions(name: Optional[str] = None, specialty: Optional[str] = None,
                             city: Optional[str] = None) -> list:
    conditions: list = []
    name, specialty, city = _clean(name), _clean(specialty), _clean(city)
    if name:
        conditions.append(_contains('name', name))
    if specialty:
        conditions.append(Exists(DoctorSpecialty.objects.filter(
            _contains('specialty__name', specialty), doctor=OuterRef('pk'),
        )))
    if city:
        conditions.append(Exists(DoctorCity.objects.filter(
            _contains('city__name', city), doctor=OuterRef('pk'),
        )))
    return conditions


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
