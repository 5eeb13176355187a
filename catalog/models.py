import logging
import uuid

from django.contrib.auth.models import User
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)

EXPERIENCE_LEVELS = [
    ('BEGINNER', 'Beginner'),
    ('INTERMEDIATE', 'Intermediate'),
    ('ADVANCED', 'Advanced'),
    ('PRO', 'Pro'),
]

MOD_CATEGORIES = [
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
]

EVENT_TYPES = [
    ('AUTOCROSS', 'Autocross'),
    ('ROADCOURSE', 'Road Course'),
    ('DRIFT', 'Drift'),
    ('DRAG', 'Drag'),
]

DRIVING_CONDITIONS = [
    ('DRY', 'Dry'),
    ('WET', 'Wet'),
]

TRACK_STATUSES = [
    ('PENDING', 'Pending'),
    ('APPROVED', 'Approved'),
    ('REJECTED', 'Rejected'),
]

CAR_YEAR_MIN = 1900
CAR_YEAR_MAX = 2030
ZONE_POSITION_MIN = 0
ZONE_POSITION_MAX = 100


class DriverProfile(models.Model):
    """Driver-facing attributes of a registered user"""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='driver_profile')
    name = models.CharField(max_length=100, blank=True, null=True, help_text="Display name")
    experience = models.CharField(max_length=20, choices=EXPERIENCE_LEVELS, default='BEGINNER')
    image = models.CharField(max_length=500, blank=True, null=True, help_text="Avatar URL")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Driver Profile"
        verbose_name_plural = "Driver Profiles"

    def __str__(self):
        return self.name or self.user.email


# Signal to create DriverProfile when User is created
@receiver(post_save, sender=User)
def create_driver_profile(sender, instance, created, **kwargs):
    if created:
        DriverProfile.objects.create(user=instance)


class Car(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='cars')
    make = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.IntegerField(
        validators=[MinValueValidator(CAR_YEAR_MIN), MaxValueValidator(CAR_YEAR_MAX)]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(year__gte=CAR_YEAR_MIN, year__lte=CAR_YEAR_MAX),
                name='car_year_range',
            ),
        ]

    def __str__(self):
        return f"{self.year} {self.make} {self.model}"


class CarMod(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    car = models.ForeignKey(Car, on_delete=models.CASCADE, related_name='mods')
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=MOD_CATEGORIES)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.name} ({self.category})"


class Track(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=200)
    state = models.CharField(max_length=2, blank=True, null=True, help_text="US state code")
    description = models.TextField(blank=True, null=True)
    image_url = models.CharField(
        max_length=500, blank=True, null=True,
        help_text="URL or path of the layout diagram zones are pinned to"
    )
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=TRACK_STATUSES, default='APPROVED')
    is_imported = models.BooleanField(default=False)
    uploaded_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='uploaded_tracks')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['name', 'location'], name='unique_track_name_location'),
        ]
        indexes = [
            models.Index(fields=['status', 'state'], name='track_status_state_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.location})"

    def average_rating(self):
        """Mean review rating, 0.0 when the track has no reviews"""
        avg = self.reviews.aggregate(avg=Avg('rating'))['avg']
        return float(avg) if avg is not None else 0.0


class TrackEvent(models.Model):
    """An event type hosted at a track"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    track = models.ForeignKey(Track, on_delete=models.CASCADE, related_name='events')
    event_type = models.CharField(max_length=20, choices=EVENT_TYPES)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['track', 'event_type'], name='unique_track_event_type'),
        ]

    def __str__(self):
        return f"{self.track.name} - {self.event_type}"


class TrackImage(models.Model):
    """Gallery photo attached to a track"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    track = models.ForeignKey(Track, on_delete=models.CASCADE, related_name='images')
    url = models.CharField(max_length=500)
    caption = models.CharField(max_length=300, blank=True, null=True)
    uploaded_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='track_images')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.caption or self.url


class TrackZone(models.Model):
    """
    A named spot pinned on the track layout image.

    pos_x/pos_y are percentage offsets of the image width/height so the pin
    lands in the same place whatever size the image is rendered at.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    track = models.ForeignKey(Track, on_delete=models.CASCADE, related_name='zones')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    pos_x = models.FloatField(
        validators=[MinValueValidator(ZONE_POSITION_MIN), MaxValueValidator(ZONE_POSITION_MAX)]
    )
    pos_y = models.FloatField(
        validators=[MinValueValidator(ZONE_POSITION_MIN), MaxValueValidator(ZONE_POSITION_MAX)]
    )
    event_type = models.CharField(max_length=20, choices=EVENT_TYPES, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    pos_x__gte=ZONE_POSITION_MIN, pos_x__lte=ZONE_POSITION_MAX,
                    pos_y__gte=ZONE_POSITION_MIN, pos_y__lte=ZONE_POSITION_MAX,
                ),
                name='trackzone_position_range',
            ),
        ]

    def __str__(self):
        return f"{self.track.name}: {self.name}"


class ZoneTip(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    zone = models.ForeignKey(TrackZone, on_delete=models.CASCADE, related_name='tips')
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='zone_tips')
    content = models.TextField()
    conditions = models.CharField(max_length=10, choices=DRIVING_CONDITIONS, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.content[:50]


class TrackReview(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    track = models.ForeignKey(Track, on_delete=models.CASCADE, related_name='reviews')
    track_event = models.ForeignKey(
        TrackEvent, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviews'
    )
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='track_reviews')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    content = models.TextField(blank=True, null=True)
    conditions = models.CharField(max_length=10, choices=DRIVING_CONDITIONS)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=1, rating__lte=5),
                name='trackreview_rating_range',
            ),
        ]

    def __str__(self):
        return f"{self.rating}/5 for {self.track.name} by {self.author.email}"


class LapRecord(models.Model):
    """One timed lap plus the setup the car ran it with"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    track = models.ForeignKey(Track, on_delete=models.CASCADE, related_name='lap_records')
    track_event = models.ForeignKey(
        TrackEvent, on_delete=models.SET_NULL, null=True, blank=True, related_name='lap_records'
    )
    car = models.ForeignKey(Car, on_delete=models.CASCADE, related_name='lap_records')
    driver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='lap_records')

    lap_time = models.CharField(max_length=20, help_text="Formatted lap time, e.g. 1:42.856")
    conditions = models.CharField(max_length=10, choices=DRIVING_CONDITIONS)
    notes = models.TextField(blank=True, null=True)

    # Tire pressures (psi)
    tire_pressure_fl = models.FloatField(null=True, blank=True)
    tire_pressure_fr = models.FloatField(null=True, blank=True)
    tire_pressure_rl = models.FloatField(null=True, blank=True)
    tire_pressure_rr = models.FloatField(null=True, blank=True)

    fuel_level = models.FloatField(null=True, blank=True)

    # Alignment (degrees / inches), signed
    camber_fl = models.FloatField(null=True, blank=True)
    camber_fr = models.FloatField(null=True, blank=True)
    camber_rl = models.FloatField(null=True, blank=True)
    camber_rr = models.FloatField(null=True, blank=True)
    caster_fl = models.FloatField(null=True, blank=True)
    caster_fr = models.FloatField(null=True, blank=True)
    toe_fl = models.FloatField(null=True, blank=True)
    toe_fr = models.FloatField(null=True, blank=True)
    toe_rl = models.FloatField(null=True, blank=True)
    toe_rr = models.FloatField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    TELEMETRY_FIELDS = (
        'tire_pressure_fl', 'tire_pressure_fr', 'tire_pressure_rl', 'tire_pressure_rr',
        'fuel_level',
        'camber_fl', 'camber_fr', 'camber_rl', 'camber_rr',
        'caster_fl', 'caster_fr',
        'toe_fl', 'toe_fr', 'toe_rl', 'toe_rr',
    )

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['driver', 'track'], name='laprecord_driver_track_idx'),
        ]

    def __str__(self):
        return f"{self.lap_time} at {self.track.name} ({self.car})"
