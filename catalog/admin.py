import logging

from django.contrib import admin, messages

from .models import (
    DriverProfile, Car, CarMod, Track, TrackEvent, TrackImage,
    TrackZone, ZoneTip, TrackReview, LapRecord
)

logger = logging.getLogger(__name__)


@admin.action(description="Approve selected tracks (list them publicly)")
def approve_tracks(modeladmin, request, queryset):
    count = queryset.exclude(status='APPROVED').update(status='APPROVED')
    logger.info("%s approved %d track(s)", request.user, count)
    messages.success(request, f"Approved {count} track(s).")


@admin.action(description="Reject selected tracks (hide them from listings)")
def reject_tracks(modeladmin, request, queryset):
    count = queryset.exclude(status='REJECTED').update(status='REJECTED')
    logger.info("%s rejected %d track(s)", request.user, count)
    messages.info(request, f"Rejected {count} track(s).")


class TrackEventInline(admin.TabularInline):
    model = TrackEvent
    extra = 0


class CarModInline(admin.TabularInline):
    model = CarMod
    extra = 0


@admin.register(DriverProfile)
class DriverProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'name', 'experience', 'created_at')
    list_filter = ('experience',)
    search_fields = ('name', 'user__email')


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ('year', 'make', 'model', 'owner', 'created_at')
    search_fields = ('make', 'model', 'owner__email')
    inlines = [CarModInline]


@admin.register(Track)
class TrackAdmin(admin.ModelAdmin):
    list_display = ('name', 'location', 'state', 'status', 'is_imported', 'uploaded_by', 'created_at')
    list_filter = ('status', 'state', 'is_imported')
    search_fields = ('name', 'location')
    inlines = [TrackEventInline]
    actions = [approve_tracks, reject_tracks]


@admin.register(TrackImage)
class TrackImageAdmin(admin.ModelAdmin):
    list_display = ('track', 'caption', 'uploaded_by', 'created_at')


@admin.register(TrackZone)
class TrackZoneAdmin(admin.ModelAdmin):
    list_display = ('name', 'track', 'pos_x', 'pos_y', 'event_type')
    list_filter = ('event_type',)
    search_fields = ('name', 'track__name')


@admin.register(ZoneTip)
class ZoneTipAdmin(admin.ModelAdmin):
    list_display = ('zone', 'author', 'conditions', 'created_at')
    list_filter = ('conditions',)


@admin.register(TrackReview)
class TrackReviewAdmin(admin.ModelAdmin):
    list_display = ('track', 'author', 'rating', 'conditions', 'created_at')
    list_filter = ('rating', 'conditions')
    search_fields = ('track__name', 'author__email')


@admin.register(LapRecord)
class LapRecordAdmin(admin.ModelAdmin):
    list_display = ('lap_time', 'track', 'car', 'driver', 'conditions', 'created_at')
    list_filter = ('conditions', 'track')
    search_fields = ('track__name', 'driver__email')
