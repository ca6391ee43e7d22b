import random

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.districts.models import District
from apps.performance.models import PerformanceRecord

DISTRICTS = [
    # Maharashtra
    {'district_id': 'pune', 'name': 'Pune', 'state': 'Maharashtra', 'lat': 18.5204, 'lon': 73.8567},
    {'district_id': 'mumbai', 'name': 'Mumbai', 'state': 'Maharashtra', 'lat': 19.0760, 'lon': 72.8777},
    {'district_id': 'nagpur', 'name': 'Nagpur', 'state': 'Maharashtra', 'lat': 21.1458, 'lon': 79.0882},
    {'district_id': 'nashik', 'name': 'Nashik', 'state': 'Maharashtra', 'lat': 20.0059, 'lon': 73.7910},
    # Karnataka
    {'district_id': 'bangalore-urban', 'name': 'Bangalore Urban', 'state': 'Karnataka', 'lat': 12.9716, 'lon': 77.5946},
    {'district_id': 'mysore', 'name': 'Mysore', 'state': 'Karnataka', 'lat': 12.2958, 'lon': 76.6394},
    {'district_id': 'belgaum', 'name': 'Belgaum', 'state': 'Karnataka', 'lat': 15.8497, 'lon': 74.4977},
    # Rajasthan
    {'district_id': 'jaipur', 'name': 'Jaipur', 'state': 'Rajasthan', 'lat': 26.9124, 'lon': 75.7873},
    {'district_id': 'udaipur', 'name': 'Udaipur', 'state': 'Rajasthan', 'lat': 24.5854, 'lon': 73.7125},
    {'district_id': 'jodhpur', 'name': 'Jodhpur', 'state': 'Rajasthan', 'lat': 26.2389, 'lon': 73.0243},
    # Uttar Pradesh
    {'district_id': 'lucknow', 'name': 'Lucknow', 'state': 'Uttar Pradesh', 'lat': 26.8467, 'lon': 80.9462},
    {'district_id': 'varanasi', 'name': 'Varanasi', 'state': 'Uttar Pradesh', 'lat': 25.3176, 'lon': 82.9739},
    {'district_id': 'kanpur', 'name': 'Kanpur', 'state': 'Uttar Pradesh', 'lat': 26.4499, 'lon': 80.3319},
    # Other major districts
    {'district_id': 'patna', 'name': 'Patna', 'state': 'Bihar', 'lat': 25.5941, 'lon': 85.1376},
    {'district_id': 'ahmedabad', 'name': 'Ahmedabad', 'state': 'Gujarat', 'lat': 23.0225, 'lon': 72.5714},
    {'district_id': 'hyderabad', 'name': 'Hyderabad', 'state': 'Telangana', 'lat': 17.3850, 'lon': 78.4867},
    {'district_id': 'chennai', 'name': 'Chennai', 'state': 'Tamil Nadu', 'lat': 13.0827, 'lon': 80.2707},
    {'district_id': 'kolkata', 'name': 'Kolkata', 'state': 'West Bengal', 'lat': 22.5726, 'lon': 88.3639},
    {'district_id': 'bhopal', 'name': 'Bhopal', 'state': 'Madhya Pradesh', 'lat': 23.2599, 'lon': 77.4126},
    {'district_id': 'chandigarh', 'name': 'Chandigarh', 'state': 'Chandigarh', 'lat': 30.7333, 'lon': 76.7794},
]


def sample_month(district, month, year, rate):
    total_households = random.randint(10000, 60000)
    total_workers = int(total_households * random.uniform(0.2, 1.0))
    person_days = int(total_workers * random.uniform(15, 30))
    total_funds = person_days * rate  # rupees per person day
    return PerformanceRecord(
        district=district,
        month=month,
        year=year,
        total_households=total_households,
        total_workers=total_workers,
        person_days=person_days,
        women_participation_pct=round(random.uniform(40, 70), 1),
        scst_participation_pct=round(random.uniform(20, 40), 1),
        total_funds=round(total_funds),
        funds_utilized=round(total_funds * random.uniform(0.75, 1.0)),
    )


class Command(BaseCommand):
    help = 'Seed reference districts, optionally with sample MGNREGA performance data'

    def add_arguments(self, parser):
        parser.add_argument(
            '--with-sample-data',
            action='store_true',
            help='Generate random monthly records for the current and previous year',
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete all districts and performance records first',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            PerformanceRecord.objects.all().delete()
            District.objects.all().delete()
            self.stdout.write(self.style.WARNING('Cleared existing data'))

        created_count = 0
        for dist_data in DISTRICTS:
            district, created = District.objects.update_or_create(
                district_id=dist_data['district_id'],
                defaults={
                    'name': dist_data['name'],
                    'state': dist_data['state'],
                    'latitude': dist_data['lat'],
                    'longitude': dist_data['lon'],
                }
            )
            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'Created district: {district.name}'))

        self.stdout.write(self.style.SUCCESS(f'Seeded {len(DISTRICTS)} districts ({created_count} new)'))

        if options['with_sample_data']:
            current_year = timezone.localdate().year
            seeded = District.objects.filter(district_id__in=[d['district_id'] for d in DISTRICTS])
            records = []
            for district in seeded:
                for year, rate in ((current_year, 250), (current_year - 1, 240)):
                    for month in range(1, 13):
                        records.append(sample_month(district, month, year, rate))

            PerformanceRecord.objects.filter(district_id__in=[d.district_id for d in seeded]).delete()
            PerformanceRecord.objects.bulk_create(records, batch_size=100)
            self.stdout.write(self.style.SUCCESS(f'Seeded {len(records)} performance records'))
