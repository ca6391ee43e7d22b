from django.contrib import admin
from .models import PerformanceRecord

@admin.register(PerformanceRecord)
class PerformanceRecordAdmin(admin.ModelAdmin):
    list_display = ('district', 'year', 'month', 'total_workers', 'person_days', 'total_funds', 'funds_utilized')
    list_filter = ('year', 'month', 'district__state')
    search_fields = ('district__name', 'district__district_id')
    ordering = ('-year', '-month')
