"""
Response shapes for the JSON API.

Plain functions turning model instances into dicts for JsonResponse (whose
encoder handles UUIDs and datetimes).
"""
from catalog.models import DriverProfile, LapRecord


def driver_profile(user):
    try:
        return user.driver_profile
    except DriverProfile.DoesNotExist:
        return DriverProfile.objects.create(user=user)


def user_brief(user):
    return {'id': user.pk, 'name': driver_profile(user).name}


def user_with_experience(user):
    profile = driver_profile(user)
    return {'id': user.pk, 'name': profile.name, 'experience': profile.experience}


def car_brief(car):
    return {'id': car.pk, 'make': car.make, 'model': car.model, 'year': car.year}


def serialize_mod(mod):
    return {
        'id': mod.pk,
        'name': mod.name,
        'category': mod.category,
        'notes': mod.notes,
        'car_id': mod.car_id,
    }


def serialize_car(car, mods=None):
    if mods is None:
        mods = car.mods.all()
    return {
        'id': car.pk,
        'make': car.make,
        'model': car.model,
        'year': car.year,
        'owner_id': car.owner_id,
        'created_at': car.created_at,
        'updated_at': car.updated_at,
        'mods': [serialize_mod(mod) for mod in mods],
    }


def serialize_event(event):
    if event is None:
        return None
    return {'id': event.pk, 'event_type': event.event_type, 'track_id': event.track_id}


def _track_fields(track):
    return {
        'id': track.pk,
        'name': track.name,
        'location': track.location,
        'state': track.state,
        'description': track.description,
        'image_url': track.image_url,
        'latitude': track.latitude,
        'longitude': track.longitude,
        'status': track.status,
        'is_imported': track.is_imported,
        'uploaded_by_id': track.uploaded_by_id,
        'created_at': track.created_at,
        'updated_at': track.updated_at,
    }


def _track_aggregates(track):
    """Reads the annotations added by queries.with_track_summary"""
    return {
        'counts': {
            'reviews': track.review_count,
            'zones': track.zone_count,
            'lap_records': track.lap_record_count,
        },
        'avg_rating': float(track.avg_rating),
    }


def serialize_track_summary(track):
    data = _track_fields(track)
    data['events'] = [serialize_event(event) for event in track.events.all()]
    data['uploaded_by'] = user_brief(track.uploaded_by)
    data.update(_track_aggregates(track))
    return data


def serialize_tip(tip):
    return {
        'id': tip.pk,
        'content': tip.content,
        'conditions': tip.conditions,
        'zone_id': tip.zone_id,
        'author_id': tip.author_id,
        'created_at': tip.created_at,
        'updated_at': tip.updated_at,
        'author': user_brief(tip.author),
    }


def serialize_zone(zone, tips=None):
    if tips is None:
        tips = zone.tips.all()
    return {
        'id': zone.pk,
        'name': zone.name,
        'description': zone.description,
        'pos_x': zone.pos_x,
        'pos_y': zone.pos_y,
        'track_id': zone.track_id,
        'event_type': zone.event_type,
        'created_at': zone.created_at,
        'tips': [serialize_tip(tip) for tip in tips],
    }


def review_author(user):
    """Author identity with experience tier and their first registered car"""
    data = user_with_experience(user)
    cars = sorted(user.cars.all(), key=lambda car: car.created_at)
    data['car'] = car_brief(cars[0]) if cars else None
    return data


def serialize_review(review):
    return {
        'id': review.pk,
        'rating': review.rating,
        'content': review.content,
        'conditions': review.conditions,
        'track_id': review.track_id,
        'track_event_id': review.track_event_id,
        'author_id': review.author_id,
        'created_at': review.created_at,
        'updated_at': review.updated_at,
        'author': review_author(review.author),
        'track_event': serialize_event(review.track_event),
    }


def serialize_track_detail(track):
    data = _track_fields(track)
    data['events'] = [serialize_event(event) for event in track.events.all()]
    data['uploaded_by'] = user_with_experience(track.uploaded_by)
    data['zones'] = [serialize_zone(zone) for zone in track.zones.all()]
    data['reviews'] = [serialize_review(review) for review in track.reviews.all()]
    data.update(_track_aggregates(track))
    return data


def serialize_track_image(image):
    return {
        'id': image.pk,
        'url': image.url,
        'caption': image.caption,
        'track_id': image.track_id,
        'created_at': image.created_at,
        'uploaded_by': user_brief(image.uploaded_by),
    }


def serialize_lap_record(record):
    data = {
        'id': record.pk,
        'lap_time': record.lap_time,
        'conditions': record.conditions,
        'notes': record.notes,
    }
    for field in LapRecord.TELEMETRY_FIELDS:
        data[field] = getattr(record, field)
    data.update({
        'track_id': record.track_id,
        'track_event_id': record.track_event_id,
        'car_id': record.car_id,
        'driver_id': record.driver_id,
        'created_at': record.created_at,
        'updated_at': record.updated_at,
        'track': {
            'id': record.track.pk,
            'name': record.track.name,
            'location': record.track.location,
        },
        'track_event': serialize_event(record.track_event),
        'car': car_brief(record.car),
    })
    return data


def serialize_profile(user, cars, counts):
    profile = driver_profile(user)
    return {
        'id': user.pk,
        'name': profile.name,
        'email': user.email,
        'experience': profile.experience,
        'image': profile.image,
        'created_at': profile.created_at,
        'cars': [serialize_car(car) for car in cars],
        'counts': counts,
    }
