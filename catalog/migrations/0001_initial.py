import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='DriverProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, help_text='Display name', max_length=100, null=True)),
                ('experience', models.CharField(choices=[
                    ('BEGINNER', 'Beginner'),
                    ('INTERMEDIATE', 'Intermediate'),
                    ('ADVANCED', 'Advanced'),
                    ('PRO', 'Pro'),
                ], default='BEGINNER', max_length=20)),
                ('image', models.CharField(blank=True, help_text='Avatar URL', max_length=500, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='driver_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Driver Profile',
                'verbose_name_plural': 'Driver Profiles',
            },
        ),
        migrations.CreateModel(
            name='Car',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('make', models.CharField(max_length=100)),
                ('model', models.CharField(max_length=100)),
                ('year', models.IntegerField(validators=[
                    django.core.validators.MinValueValidator(1900),
                    django.core.validators.MaxValueValidator(2030),
                ])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cars', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('year__gte', 1900), ('year__lte', 2030)), name='car_year_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CarMod',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('category', models.CharField(choices=[
                    ('ENGINE', 'Engine'),
                    ('SUSPENSION', 'Suspension'),
                    ('AERO', 'Aero'),
                    ('BRAKES', 'Brakes'),
                    ('WHEELS_TIRES', 'Wheels & Tires'),
                    ('DRIVETRAIN', 'Drivetrain'),
                    ('EXHAUST', 'Exhaust'),
                    ('INTERIOR', 'Interior'),
                    ('EXTERIOR', 'Exterior'),
                    ('ELECTRONICS', 'Electronics'),
                    ('OTHER', 'Other'),
                ], max_length=20)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('car', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mods', to='catalog.car')),
            ],
            options={
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='Track',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('location', models.CharField(max_length=200)),
                ('state', models.CharField(blank=True, help_text='US state code', max_length=2, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('image_url', models.CharField(blank=True, help_text='URL or path of the layout diagram zones are pinned to', max_length=500, null=True)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('status', models.CharField(choices=[
                    ('PENDING', 'Pending'),
                    ('APPROVED', 'Approved'),
                    ('REJECTED', 'Rejected'),
                ], default='APPROVED', max_length=20)),
                ('is_imported', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('uploaded_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='uploaded_tracks', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'state'], name='track_status_state_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('name', 'location'), name='unique_track_name_location'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TrackEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_type', models.CharField(choices=[
                    ('AUTOCROSS', 'Autocross'),
                    ('ROADCOURSE', 'Road Course'),
                    ('DRIFT', 'Drift'),
                    ('DRAG', 'Drag'),
                ], max_length=20)),
                ('track', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='catalog.track')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('track', 'event_type'), name='unique_track_event_type'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TrackImage',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('url', models.CharField(max_length=500)),
                ('caption', models.CharField(blank=True, max_length=300, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('track', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='images', to='catalog.track')),
                ('uploaded_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='track_images', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='TrackZone',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('pos_x', models.FloatField(validators=[
                    django.core.validators.MinValueValidator(0),
                    django.core.validators.MaxValueValidator(100),
                ])),
                ('pos_y', models.FloatField(validators=[
                    django.core.validators.MinValueValidator(0),
                    django.core.validators.MaxValueValidator(100),
                ])),
                ('event_type', models.CharField(blank=True, choices=[
                    ('AUTOCROSS', 'Autocross'),
                    ('ROADCOURSE', 'Road Course'),
                    ('DRIFT', 'Drift'),
                    ('DRAG', 'Drag'),
                ], max_length=20, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('track', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='zones', to='catalog.track')),
            ],
            options={
                'ordering': ['created_at'],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('pos_x__gte', 0), ('pos_x__lte', 100), ('pos_y__gte', 0), ('pos_y__lte', 100)),
                        name='trackzone_position_range',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='ZoneTip',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('content', models.TextField()),
                ('conditions', models.CharField(blank=True, choices=[('DRY', 'Dry'), ('WET', 'Wet')], max_length=10, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='zone_tips', to=settings.AUTH_USER_MODEL)),
                ('zone', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tips', to='catalog.trackzone')),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='TrackReview',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('rating', models.PositiveSmallIntegerField(validators=[
                    django.core.validators.MinValueValidator(1),
                    django.core.validators.MaxValueValidator(5),
                ])),
                ('content', models.TextField(blank=True, null=True)),
                ('conditions', models.CharField(choices=[('DRY', 'Dry'), ('WET', 'Wet')], max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='track_reviews', to=settings.AUTH_USER_MODEL)),
                ('track', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='catalog.track')),
                ('track_event', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviews', to='catalog.trackevent')),
            ],
            options={
                'ordering': ['-created_at'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('rating__gte', 1), ('rating__lte', 5)), name='trackreview_rating_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LapRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('lap_time', models.CharField(help_text='Formatted lap time, e.g. 1:42.856', max_length=20)),
                ('conditions', models.CharField(choices=[('DRY', 'Dry'), ('WET', 'Wet')], max_length=10)),
                ('notes', models.TextField(blank=True, null=True)),
                ('tire_pressure_fl', models.FloatField(blank=True, null=True)),
                ('tire_pressure_fr', models.FloatField(blank=True, null=True)),
                ('tire_pressure_rl', models.FloatField(blank=True, null=True)),
                ('tire_pressure_rr', models.FloatField(blank=True, null=True)),
                ('fuel_level', models.FloatField(blank=True, null=True)),
                ('camber_fl', models.FloatField(blank=True, null=True)),
                ('camber_fr', models.FloatField(blank=True, null=True)),
                ('camber_rl', models.FloatField(blank=True, null=True)),
                ('camber_rr', models.FloatField(blank=True, null=True)),
                ('caster_fl', models.FloatField(blank=True, null=True)),
                ('caster_fr', models.FloatField(blank=True, null=True)),
                ('toe_fl', models.FloatField(blank=True, null=True)),
                ('toe_fr', models.FloatField(blank=True, null=True)),
                ('toe_rl', models.FloatField(blank=True, null=True)),
                ('toe_rr', models.FloatField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('car', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lap_records', to='catalog.car')),
                ('driver', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lap_records', to=settings.AUTH_USER_MODEL)),
                ('track', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lap_records', to='catalog.track')),
                ('track_event', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='lap_records', to='catalog.trackevent')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['driver', 'track'], name='laprecord_driver_track_idx')],
            },
        ),
    ]
