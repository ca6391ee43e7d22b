from django.contrib import admin
from apps.performance.models import PerformanceRecord
from .models import District

@admin.register(District)
class DistrictAdmin(admin.ModelAdmin):
    list_display = ('name', 'state', 'district_id', 'get_latest_period')
    search_fields = ('name', 'state', 'district_id')
    list_filter = ('state',)

    def get_latest_period(self, obj):
        """Most recent month with synced data"""
        latest = PerformanceRecord.objects.filter(district=obj).order_by('-year', '-month').first()
        if latest:
            return f"{latest.year}/{latest.month:02d}"
        return "N/A"

    get_latest_period.short_description = 'Latest Data'
