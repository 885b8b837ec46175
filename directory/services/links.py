"""
Exact-set reconciliation of a doctor's join rows.

``reconcile_links`` treats the target ids as the complete desired
membership: rows outside the target are deleted, missing rows are
inserted and rows present on both sides are left alone.  It must run
inside the caller's ``transaction.atomic`` block.
"""
import logging
from typing import Iterable, Type

from django.db import models

from directory.exceptions import UnknownReferenceError

logger = logging.getLogger(__name__)


def resolve_ids(model: Type[models.Model], ids: Iterable[int], *, field: str, using: str = 'default') -> set[int]:
    """Return the distinct ``ids`` after checking they all exist in ``model``."""
    wanted = set(ids)
    found = set(model.objects.using(using).filter(pk__in=wanted).values_list('pk', flat=True))
    missing = wanted - found
    if missing:
        logger.warning('Unknown %s ids: %s', field, sorted(missing))
        raise UnknownReferenceError(
            f"Unknown {model._meta.verbose_name} id(s): {', '.join(str(i) for i in sorted(missing))}",
            field=field,
            ids=missing,
        )
    return wanted


def reconcile_links(through: Type[models.Model], owner_field: str, target_field: str,
                    owner: models.Model, target_ids: Iterable[int], *, using: str = 'default') -> tuple[set[int], set[int]]:
    """Make ``owner``'s rows in ``through`` match ``target_ids`` exactly.

    Returns ``(added, removed)`` id sets.
    """
    target = set(target_ids)
    rows = through.objects.using(using).filter(**{owner_field: owner})
    current = set(rows.values_list(f'{target_field}_id', flat=True))

    removed = current - target
    added = target - current
    if removed:
        rows.filter(**{f'{target_field}_id__in': removed}).delete()
    if added:
        through.objects.using(using).bulk_create(
            [through(**{owner_field: owner, f'{target_field}_id': pk}) for pk in sorted(added)]
        )
    return added, removed
