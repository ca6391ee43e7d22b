from django.db import models


class District(models.Model):
    district_id = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['state', 'name']

    def __str__(self):
        return f"{self.name}, {self.state}"

    def to_dict(self):
        return {
            'districtId': self.district_id,
            'name': self.name,
            'state': self.state,
            'latitude': float(self.latitude) if self.latitude is not None else None,
            'longitude': float(self.longitude) if self.longitude is not None else None,
        }
