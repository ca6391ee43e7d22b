from django.core.management.base import BaseCommand
from django.db.models import Count, F, Q

from apps.districts.models import District
from apps.performance.models import PerformanceRecord


class Command(BaseCommand):
    help = 'Check data health and coverage'

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('\n=== MGNREGA Data Health Check ===\n'))

        total_districts = District.objects.count()
        total_records = PerformanceRecord.objects.count()

        self.stdout.write(f"Total Districts: {total_districts}")
        self.stdout.write(f"Total Performance Records: {total_records}")

        annotated = District.objects.annotate(data_count=Count('performance_records'))
        districts_with_data = annotated.filter(data_count__gt=0)
        districts_without_data = annotated.filter(data_count=0)

        self.stdout.write(f"\nDistricts WITH data: {districts_with_data.count()}")
        self.stdout.write(f"Districts WITHOUT data: {districts_without_data.count()}")

        self.stdout.write(self.style.WARNING('\n=== Coverage by State ==='))

        states = District.objects.values('state').annotate(
            total=Count('id', distinct=True),
            with_data=Count('id', filter=Q(performance_records__isnull=False), distinct=True),
        ).order_by('-total', 'state')

        for state in states:
            pct = (state['with_data'] / state['total'] * 100) if state['total'] > 0 else 0
            self.stdout.write(f"  {state['state']}: {state['with_data']}/{state['total']} ({pct:.1f}%)")

        if districts_without_data.exists():
            self.stdout.write(self.style.WARNING('\n=== Districts Without Data ==='))
            for d in districts_without_data[:10]:
                self.stdout.write(f"  - {d.name}, {d.state} ({d.district_id})")

        overspent = PerformanceRecord.objects.filter(funds_utilized__gt=F('total_funds')).count()
        if overspent:
            self.stdout.write(self.style.ERROR(f'\n{overspent} records report funds utilized above total funds'))

        self.stdout.write(self.style.SUCCESS('\nHealth check complete!'))
