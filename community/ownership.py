"""
Who may mutate what.

Private resources (cars, their mods, lap records) are looked up scoped to the
caller, so a wrong owner and a missing row are indistinguishable and the view
answers 404. Public resources (tracks and everything hanging off them) are
known to exist, so a denied mutation there answers 403.
"""
from django.db.models import Q

from catalog.models import Car, CarMod, LapRecord, Track, TrackImage, TrackZone


def owner_id_of(resource):
    """Id of the user who controls a public resource, following the zone to its track"""
    if isinstance(resource, Track):
        return resource.uploaded_by_id
    if isinstance(resource, TrackZone):
        return resource.track.uploaded_by_id
    if isinstance(resource, TrackImage):
        return resource.uploaded_by_id
    raise TypeError(f"No ownership rule for {type(resource).__name__}")


def is_owner(user, resource):
    return user is not None and user.is_authenticated and owner_id_of(resource) == user.pk


def visible_tracks(user=None):
    """Approved tracks, plus any the caller uploaded that are still in moderation"""
    if user is not None and user.is_authenticated:
        return Track.objects.filter(Q(status='APPROVED') | Q(uploaded_by=user))
    return Track.objects.filter(status='APPROVED')


def find_visible_track(user, track_id):
    return visible_tracks(user).filter(pk=track_id).first()


def find_owned_car(user, car_id):
    return Car.objects.filter(pk=car_id, owner=user).first()


def find_owned_car_mod(user, car_id, mod_id):
    return CarMod.objects.filter(pk=mod_id, car_id=car_id, car__owner=user).first()


def find_owned_lap_record(user, record_id):
    return LapRecord.objects.filter(pk=record_id, driver=user).first()


def find_zone_on_track(track, zone_id):
    return TrackZone.objects.filter(pk=zone_id, track=track).select_related('track').first()


def can_edit_track(user, track):
    return is_owner(user, track)


def can_edit_zone_text(user, zone):
    # Zone names and descriptions are community-maintained
    return user is not None and user.is_authenticated


def can_delete_zone(user, zone):
    return is_owner(user, zone)


def can_delete_track_image(user, image):
    return is_owner(user, image) or is_owner(user, image.track)
