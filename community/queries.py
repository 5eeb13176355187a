"""
Read-side composition: track listings with aggregates, the nested track
detail, lap-book and garage listings.

Aggregates are computed per query from the review/zone/lap rows rather than
stored on Track, so they can never go stale.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import (
    Avg, Count, Exists, FloatField, IntegerField, OuterRef, Prefetch, Q, Subquery, Value
)
from django.db.models.functions import Coalesce

from catalog.models import (
    Car, LapRecord, Track, TrackEvent, TrackImage, TrackReview, TrackZone, ZoneTip
)

from .ownership import visible_tracks

logger = logging.getLogger(__name__)


def _per_track_count(model):
    rows = (
        model.objects.filter(track=OuterRef('pk'))
        .order_by()
        .values('track')
        .annotate(n=Count('pk'))
        .values('n')
    )
    return Coalesce(Subquery(rows[:1], output_field=IntegerField()), Value(0))


def _average_rating():
    # A correlated subquery keeps the mean independent of the zone/lap joins
    rows = (
        TrackReview.objects.filter(track=OuterRef('pk'))
        .order_by()
        .values('track')
        .annotate(avg=Avg('rating'))
        .values('avg')
    )
    return Coalesce(
        Subquery(rows[:1], output_field=FloatField()),
        Value(0.0),
        output_field=FloatField(),
    )


def with_track_summary(queryset):
    """Annotate avg_rating, review_count, zone_count and lap_record_count"""
    return queryset.annotate(
        avg_rating=_average_rating(),
        review_count=_per_track_count(TrackReview),
        zone_count=_per_track_count(TrackZone),
        lap_record_count=_per_track_count(LapRecord),
    )


def list_tracks(search='', event_type='', state=''):
    """
    Publicly listed tracks matching every supplied filter, newest first.

    Args:
        search: Substring matched against name or location; empty means no filter
        event_type: Keep tracks hosting at least one event of this type
        state: Exact (upper-cased) state code
    """
    tracks = Track.objects.filter(status='APPROVED')

    if search:
        lookup = 'contains' if settings.TRACKSIDE_SEARCH_CASE_SENSITIVE else 'icontains'
        tracks = tracks.filter(
            Q(**{f'name__{lookup}': search}) | Q(**{f'location__{lookup}': search})
        )

    if event_type:
        tracks = tracks.filter(
            Exists(TrackEvent.objects.filter(track=OuterRef('pk'), event_type=event_type))
        )

    if state:
        tracks = tracks.filter(state=state.upper())

    return (
        with_track_summary(tracks)
        .select_related('uploaded_by__driver_profile')
        .prefetch_related('events')
        .order_by('-created_at')
    )


def get_track_summary(track_id):
    return (
        with_track_summary(Track.objects.filter(pk=track_id))
        .select_related('uploaded_by__driver_profile')
        .prefetch_related('events')
        .first()
    )


def get_track_detail(track_id, user=None, event_type=''):
    """
    Load one track with events, zones -> tips -> authors, reviews -> authors
    (with their cars) and the summary aggregates.

    All queries run inside one transaction so the pieces describe the same
    moment. Returns None when the track is missing or not visible to ``user``.

    Args:
        track_id: Track primary key
        user: The caller, used for moderation visibility
        event_type: When set, only zones tagged with this event type are included
    """
    zones = TrackZone.objects.order_by('created_at').prefetch_related(
        Prefetch(
            'tips',
            queryset=ZoneTip.objects.select_related('author__driver_profile').order_by('-created_at'),
        )
    )
    if event_type:
        zones = zones.filter(event_type=event_type)

    reviews = (
        TrackReview.objects.select_related('author__driver_profile', 'track_event')
        .prefetch_related(
            Prefetch('author__cars', queryset=Car.objects.order_by('created_at'))
        )
        .order_by('-created_at')
    )

    with transaction.atomic():
        track = (
            with_track_summary(visible_tracks(user).filter(pk=track_id))
            .select_related('uploaded_by__driver_profile')
            .prefetch_related(
                'events',
                Prefetch('zones', queryset=zones),
                Prefetch('reviews', queryset=reviews),
            )
            .first()
        )
    return track


def list_track_images(track):
    return (
        TrackImage.objects.filter(track=track)
        .select_related('uploaded_by__driver_profile')
        .order_by('-created_at')
    )


def list_lap_records(driver, track_id=None, car_id=None, event_type=''):
    """The driver's own lap records matching every supplied filter, newest first"""
    records = LapRecord.objects.filter(driver=driver)
    if track_id:
        records = records.filter(track_id=track_id)
    if car_id:
        records = records.filter(car_id=car_id)
    if event_type:
        records = records.filter(track_event__event_type=event_type)
    return records.select_related('track', 'car', 'track_event').order_by('-created_at')


def list_cars(owner):
    return (
        Car.objects.filter(owner=owner)
        .prefetch_related('mods')
        .order_by('-created_at')
    )


def profile_counts(user):
    return {
        'track_reviews': user.track_reviews.count(),
        'lap_records': user.lap_records.count(),
        'tracks': user.uploaded_tracks.count(),
        'zone_tips': user.zone_tips.count(),
    }
