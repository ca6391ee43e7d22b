import logging

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Count

from apps.districts.models import District
from apps.performance.client import MGNREGAApiClient
from apps.performance.exceptions import MGNREGAError
from apps.performance.services import MGNREGADataService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Sync MGNREGA data from Government API to database'

    def add_arguments(self, parser):
        parser.add_argument(
            '--district',
            action='append',
            dest='districts',
            default=[],
            help='District id to sync (repeatable, syncs all districts if not provided)'
        )
        parser.add_argument(
            '--state',
            type=str,
            default=None,
            help='Only sync districts in this state'
        )
        parser.add_argument(
            '--bulk',
            action='store_true',
            help='Fetch all districts concurrently instead of one by one with retries'
        )
        parser.add_argument(
            '--skip-existing',
            action='store_true',
            help='Skip districts that already have data'
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Clear cached API responses before syncing'
        )

    def handle(self, *args, **options):
        districts = District.objects.all()
        if options['districts']:
            districts = districts.filter(district_id__in=options['districts'])
        if options['state']:
            districts = districts.filter(state__iexact=options['state'])
        if options['skip_existing']:
            districts = districts.annotate(
                data_count=Count('performance_records')
            ).filter(data_count=0)

        district_ids = list(districts.values_list('district_id', flat=True))
        if not district_ids:
            raise CommandError('No districts to sync. Run seed_districts or fetch_all_districts first.')

        client = MGNREGAApiClient()
        if options['force']:
            client.cache.clear()

        self.stdout.write(self.style.SUCCESS(f'Starting data sync for {len(district_ids)} districts...'))

        if options['bulk']:
            outcomes = MGNREGADataService.sync_districts(district_ids, client=client)
        else:
            outcomes = []
            for idx, district_id in enumerate(district_ids, 1):
                self.stdout.write(f'[{idx}/{len(district_ids)}] Syncing {district_id}...')
                try:
                    result = MGNREGADataService.sync_district(district_id, client=client)
                    outcomes.append({'district_id': district_id, 'count': result.count, 'error': None})
                except MGNREGAError as e:
                    outcomes.append({'district_id': district_id, 'count': 0, 'error': str(e)})
                except Exception as e:
                    logger.exception(f"Unexpected error syncing district {district_id}: {e}")
                    outcomes.append({'district_id': district_id, 'count': 0, 'error': str(e)})

        success_count = 0
        for outcome in outcomes:
            if outcome['error']:
                self.stdout.write(self.style.ERROR(f"  ✗ {outcome['district_id']}: {outcome['error']}"))
            else:
                success_count += 1
                self.stdout.write(self.style.SUCCESS(f"  ✓ {outcome['district_id']}: {outcome['count']} records"))

        self.stdout.write(
            self.style.SUCCESS(
                f'\nSync complete: {success_count} succeeded, '
                f'{len(outcomes) - success_count} failed out of {len(outcomes)} total districts'
            )
        )
