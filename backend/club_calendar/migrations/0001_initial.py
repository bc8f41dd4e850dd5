import club_calendar.models
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Club',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True)),
                ('color', models.CharField(default=club_calendar.models.default_color, max_length=20)),
                ('enabled', models.BooleanField(default=True)),
                ('kind', models.CharField(choices=[('club', 'Club'), ('course', 'Course')], default='club', max_length=10)),
                ('grade', models.CharField(blank=True, help_text="Grade tag for courses, e.g. 'DP2'", max_length=50)),
                ('prioritized', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('date', models.DateField()),
                ('time', models.CharField(blank=True, help_text="Free-form local time, e.g. '15:30'", max_length=20)),
                ('description', models.TextField(blank=True)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('recurrence_frequency', models.CharField(blank=True, choices=[('daily', 'Daily'), ('weekly', 'Weekly'), ('biweekly', 'Biweekly (every 2 weeks)'), ('monthly', 'Monthly')], max_length=10)),
                ('recurrence_interval', models.PositiveIntegerField(blank=True, null=True)),
                ('recurrence_count', models.PositiveIntegerField(blank=True, null=True)),
                ('recurrence_until', models.DateField(blank=True, null=True)),
                ('recurrence_group_id', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('club', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='club_calendar.club')),
            ],
            options={
                'ordering': ['date', 'time', 'id'],
            },
        ),
    ]
