from django.db import models


class PerformanceRecord(models.Model):
    """One month of MGNREGA performance for a district, unique per (district, month, year)."""

    district = models.ForeignKey(
        'districts.District',
        to_field='district_id',
        on_delete=models.CASCADE,
        related_name='performance_records',
    )
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()

    total_households = models.PositiveIntegerField(default=0)
    total_workers = models.PositiveIntegerField(default=0)
    person_days = models.PositiveBigIntegerField(default=0)

    # Percentages, expected 0-100 but not enforced
    women_participation_pct = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    scst_participation_pct = models.DecimalField(max_digits=7, decimal_places=2, default=0)

    # Financial metrics
    total_funds = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    funds_utilized = models.DecimalField(max_digits=18, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', '-month']
        unique_together = ['district', 'month', 'year']

    def __str__(self):
        return f"{self.district_id} - {self.year}/{self.month}"

    def to_dict(self, include_district=False):
        data = {
            'id': self.pk,
            'districtId': self.district_id,
            'month': self.month,
            'year': self.year,
            'totalHouseholds': self.total_households,
            'totalWorkers': self.total_workers,
            'personDays': self.person_days,
            'womenParticipation': float(self.women_participation_pct),
            'scstParticipation': float(self.scst_participation_pct),
            'totalFunds': float(self.total_funds),
            'fundsUtilized': float(self.funds_utilized),
        }
        if include_district:
            data['district'] = self.district.to_dict()
        return data
