"""
Management command to seed the reference data (specialties and cities).

Safe to run repeatedly: rows are upserted by their natural keys.
"""
from django.core.management.base import BaseCommand

from directory.services.reference import SEED_CITIES, SEED_SPECIALTIES, seed_reference_data


class Command(BaseCommand):
    help = 'Ensure the default specialties and cities exist'

    def add_arguments(self, parser):
        parser.add_argument('--database', default='default', help='Database alias to seed')

    def handle(self, *args, **options):
        self.stdout.write('Seeding reference data...')
        created = seed_reference_data(using=options['database'])
        self.stdout.write(
            f"Specialties: {created['specialties']} created, "
            f"{len(SEED_SPECIALTIES) - created['specialties']} already present"
        )
        self.stdout.write(
            f"Cities: {created['cities']} created, "
            f"{len(SEED_CITIES) - created['cities']} already present"
        )
        self.stdout.write(self.style.SUCCESS('Database seeded successfully!'))
