from django.core.management.base import BaseCommand, CommandError

from apps.districts.models import District
from apps.performance.exceptions import MGNREGAError
from apps.performance.services import MGNREGADataService


class Command(BaseCommand):
    help = 'Fetch the district list from the MGNREGA API and store it as reference data'

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Fetching districts from MGNREGA API...'))

        try:
            created_count, updated_count = MGNREGADataService.import_districts()
        except MGNREGAError as e:
            raise CommandError(f'API request failed: {e}')

        self.stdout.write(
            self.style.SUCCESS(
                f'\n{"="*50}\n'
                f'Created: {created_count}\n'
                f'Updated: {updated_count}\n'
                f'Total: {District.objects.count()}\n'
                f'{"="*50}'
            )
        )
