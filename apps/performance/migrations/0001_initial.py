import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('districts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PerformanceRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveSmallIntegerField()),
                ('total_households', models.PositiveIntegerField(default=0)),
                ('total_workers', models.PositiveIntegerField(default=0)),
                ('person_days', models.PositiveBigIntegerField(default=0)),
                ('women_participation_pct', models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ('scst_participation_pct', models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ('total_funds', models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ('funds_utilized', models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('district', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='performance_records',
                    to='districts.district',
                    to_field='district_id',
                )),
            ],
            options={
                'ordering': ['-year', '-month'],
                'unique_together': {('district', 'month', 'year')},
            },
        ),
    ]
