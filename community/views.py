import json
import logging
import os
import uuid

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.core.files.storage import default_storage
from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from catalog.models import Car, CarMod, LapRecord, Track, TrackEvent, TrackImage, TrackReview, TrackZone, ZoneTip

from .decorators import current_identity, json_endpoint, json_login_required
from .forms import (
    CarForm, CarModForm, LapRecordFilterForm, LapRecordForm, LoginForm, ProfileForm,
    RegisterForm, TrackDetailFilterForm, TrackFilterForm, TrackForm, TrackImageForm,
    TrackReviewForm, TrackUpdateForm, TrackZoneForm, UploadForm, ZoneTipForm, ZoneUpdateForm,
)
from .ownership import (
    can_delete_track_image, can_delete_zone, can_edit_track, can_edit_zone_text,
    find_owned_car, find_owned_car_mod, find_owned_lap_record, find_visible_track,
    find_zone_on_track,
)
from .queries import (
    get_track_detail, get_track_summary, list_cars, list_lap_records, list_track_images,
    list_tracks, profile_counts,
)
from .serializers import (
    driver_profile, serialize_car, serialize_lap_record, serialize_mod, serialize_profile,
    serialize_review, serialize_tip, serialize_track_detail, serialize_track_image,
    serialize_track_summary, serialize_zone, user_brief,
)

logger = logging.getLogger(__name__)


def _error(message, status):
    return JsonResponse({'error': message}, status=status)


def _validation_error(form):
    fields = {name: [str(message) for message in messages] for name, messages in form.errors.items()}
    return JsonResponse({'error': 'Validation failed', 'fields': fields}, status=400)


def _not_found(entity):
    return _error(f'{entity} not found', 404)


def _unauthorized():
    return _error('Unauthorized', 401)


def _read_json(request):
    """
    Decode the request body as a JSON object.

    Returns (data, None) on success or (None, error_response) when the body is
    not a JSON object. An empty body decodes to an empty dict.
    """
    if not request.body:
        return {}, None
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        return None, _error('Invalid request body', 400)
    if not isinstance(data, dict):
        return None, _error('Invalid request body', 400)
    return data, None


def _event_on_track(track, event_id):
    return TrackEvent.objects.filter(pk=event_id, track=track).first()


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('register')
def register(request):
    data, error = _read_json(request)
    if error:
        return error
    form = RegisterForm(data)
    if not form.is_valid():
        return _validation_error(form)

    email = form.cleaned_data['email']
    if User.objects.filter(username=email).exists():
        return _error('Email already registered', 409)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email, email=email, password=form.cleaned_data['password']
            )
            profile = driver_profile(user)
            profile.name = form.cleaned_data['name']
            profile.save()
    except IntegrityError:
        return _error('Email already registered', 409)

    logger.info(f"Registered user {user.pk} ({email})")
    return JsonResponse({'user': {'id': user.pk, 'name': profile.name, 'email': email}}, status=201)


@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('login')
def login_view(request):
    data, error = _read_json(request)
    if error:
        return error
    form = LoginForm(data)
    if not form.is_valid():
        return _validation_error(form)

    user = authenticate(
        request, username=form.cleaned_data['email'], password=form.cleaned_data['password']
    )
    if user is None:
        return _error('Invalid credentials', 401)

    login(request, user)
    return JsonResponse({'user': user_brief(user)})


@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('logout')
def logout_view(request):
    logout(request)
    return JsonResponse({'success': True})


@csrf_exempt
@require_http_methods(['GET', 'PUT'])
@json_endpoint('profile')
@json_login_required
def profile(request):
    user = request.user
    if request.method == 'PUT':
        data, error = _read_json(request)
        if error:
            return error
        form = ProfileForm(data)
        if not form.is_valid():
            return _validation_error(form)
        profile = driver_profile(user)
        profile.name = form.cleaned_data['name']
        profile.experience = form.cleaned_data['experience']
        profile.save()
        logger.info(f"User {user.pk} updated their profile")

    return JsonResponse({'user': serialize_profile(user, list_cars(user), profile_counts(user))})


# ---------------------------------------------------------------------------
# Garage
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@json_endpoint('cars')
@json_login_required
def cars(request):
    if request.method == 'GET':
        return JsonResponse({'cars': [serialize_car(car) for car in list_cars(request.user)]})

    data, error = _read_json(request)
    if error:
        return error
    form = CarForm(data)
    if not form.is_valid():
        return _validation_error(form)

    car = Car.objects.create(owner=request.user, **form.cleaned_data)
    logger.info(f"User {request.user.pk} added car {car.pk}")
    return JsonResponse({'car': serialize_car(car, mods=[])}, status=201)


@csrf_exempt
@require_http_methods(['PUT', 'DELETE'])
@json_endpoint('car')
@json_login_required
def car_detail(request, car_id):
    if request.method == 'DELETE':
        car = find_owned_car(request.user, car_id)
        if car is None:
            return _not_found('Car')
        car.delete()
        logger.info(f"User {request.user.pk} deleted car {car_id}")
        return JsonResponse({'success': True})

    data, error = _read_json(request)
    if error:
        return error
    form = CarForm(data)
    if not form.is_valid():
        return _validation_error(form)

    car = find_owned_car(request.user, car_id)
    if car is None:
        return _not_found('Car')
    for field, value in form.cleaned_data.items():
        setattr(car, field, value)
    car.save()
    return JsonResponse({'car': serialize_car(car)})


@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('add_mod')
@json_login_required
def car_mods(request, car_id):
    data, error = _read_json(request)
    if error:
        return error
    form = CarModForm(data)
    if not form.is_valid():
        return _validation_error(form)

    car = find_owned_car(request.user, car_id)
    if car is None:
        return _not_found('Car')

    mod = CarMod.objects.create(
        car=car,
        name=form.cleaned_data['name'],
        category=form.cleaned_data['category'],
        notes=form.cleaned_data['notes'] or None,
    )
    logger.info(f"User {request.user.pk} added mod {mod.pk} to car {car.pk}")
    return JsonResponse({'mod': serialize_mod(mod)}, status=201)


@csrf_exempt
@require_http_methods(['DELETE'])
@json_endpoint('delete_mod')
@json_login_required
def car_mod_detail(request, car_id, mod_id):
    mod = find_owned_car_mod(request.user, car_id, mod_id)
    if mod is None:
        return _not_found('Mod')
    mod.delete()
    logger.info(f"User {request.user.pk} deleted mod {mod_id}")
    return JsonResponse({'success': True})


# ---------------------------------------------------------------------------
# Tracks
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@json_endpoint('tracks')
def tracks(request):
    if request.method == 'GET':
        form = TrackFilterForm(request.GET)
        if not form.is_valid():
            return _validation_error(form)
        listing = list_tracks(**form.cleaned_data)
        return JsonResponse({'tracks': [serialize_track_summary(track) for track in listing]})

    if current_identity(request) is None:
        return _unauthorized()
    data, error = _read_json(request)
    if error:
        return error
    form = TrackForm(data)
    if not form.is_valid():
        return _validation_error(form)

    cleaned = form.cleaned_data
    if Track.objects.filter(name=cleaned['name'], location=cleaned['location']).exists():
        return _error('A track with this name and location already exists', 409)

    try:
        # A track never exists without its events
        with transaction.atomic():
            track = Track.objects.create(
                name=cleaned['name'],
                location=cleaned['location'],
                state=cleaned['state'],
                description=cleaned['description'] or None,
                image_url=cleaned['image_url'] or None,
                latitude=cleaned['latitude'],
                longitude=cleaned['longitude'],
                status='APPROVED',
                uploaded_by=request.user,
            )
            TrackEvent.objects.bulk_create(
                [TrackEvent(track=track, event_type=event_type) for event_type in cleaned['event_types']]
            )
    except IntegrityError:
        return _error('A track with this name and location already exists', 409)

    logger.info(f"User {request.user.pk} created track {track.pk} ({track.name})")
    return JsonResponse({'track': serialize_track_summary(get_track_summary(track.pk))}, status=201)


@csrf_exempt
@require_http_methods(['GET', 'PATCH'])
@json_endpoint('track')
def track_detail(request, track_id):
    if request.method == 'GET':
        form = TrackDetailFilterForm(request.GET)
        if not form.is_valid():
            return _validation_error(form)
        track = get_track_detail(track_id, user=request.user, event_type=form.cleaned_data['event_type'])
        if track is None:
            return _not_found('Track')
        return JsonResponse({'track': serialize_track_detail(track)})

    if current_identity(request) is None:
        return _unauthorized()
    data, error = _read_json(request)
    if error:
        return error
    form = TrackUpdateForm(data)
    if not form.is_valid():
        return _validation_error(form)

    track = find_visible_track(request.user, track_id)
    if track is None:
        return _not_found('Track')
    if not can_edit_track(request.user, track):
        return _error('You can only edit tracks you uploaded', 403)

    for field, value in form.cleaned_data.items():
        if field not in data:
            continue
        if field in ('description', 'image_url'):
            value = value or None
        setattr(track, field, value)
    try:
        with transaction.atomic():
            track.save()
    except IntegrityError:
        return _error('A track with this name and location already exists', 409)

    logger.info(f"User {request.user.pk} updated track {track.pk}")
    return JsonResponse({'track': serialize_track_summary(get_track_summary(track.pk))})


@csrf_exempt
@require_http_methods(['GET', 'POST', 'DELETE'])
@json_endpoint('track_images')
def track_images(request, track_id):
    if request.method == 'GET':
        track = find_visible_track(request.user, track_id)
        if track is None:
            return _not_found('Track')
        return JsonResponse({'images': [serialize_track_image(image) for image in list_track_images(track)]})

    if current_identity(request) is None:
        return _unauthorized()

    if request.method == 'DELETE':
        image_id = request.GET.get('image_id')
        if not image_id:
            return _error('Image ID required', 400)
        try:
            image_id = uuid.UUID(image_id)
        except ValueError:
            return _not_found('Image')
        image = (
            TrackImage.objects.filter(pk=image_id, track_id=track_id)
            .select_related('track')
            .first()
        )
        if image is None:
            return _not_found('Image')
        if not can_delete_track_image(request.user, image):
            return _error('You cannot delete this image', 403)
        image.delete()
        logger.info(f"User {request.user.pk} deleted image {image_id} from track {track_id}")
        return JsonResponse({'success': True})

    data, error = _read_json(request)
    if error:
        return error
    form = TrackImageForm(data)
    if not form.is_valid():
        return _validation_error(form)

    track = find_visible_track(request.user, track_id)
    if track is None:
        return _not_found('Track')
    image = TrackImage.objects.create(
        track=track,
        url=form.cleaned_data['url'],
        caption=form.cleaned_data['caption'] or None,
        uploaded_by=request.user,
    )
    logger.info(f"User {request.user.pk} added image {image.pk} to track {track.pk}")
    return JsonResponse({'image': serialize_track_image(image)}, status=201)


@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('add_review')
@json_login_required
def track_reviews(request, track_id):
    data, error = _read_json(request)
    if error:
        return error
    form = TrackReviewForm(data)
    if not form.is_valid():
        return _validation_error(form)

    track = find_visible_track(request.user, track_id)
    if track is None:
        return _not_found('Track')

    event = None
    if form.cleaned_data['track_event_id']:
        event = _event_on_track(track, form.cleaned_data['track_event_id'])
        if event is None:
            return _not_found('Track event')

    review = TrackReview.objects.create(
        track=track,
        track_event=event,
        author=request.user,
        rating=form.cleaned_data['rating'],
        content=form.cleaned_data['content'] or None,
        conditions=form.cleaned_data['conditions'],
    )
    logger.info(f"User {request.user.pk} reviewed track {track.pk} ({review.rating}/5)")
    return JsonResponse({'review': serialize_review(review)}, status=201)


# ---------------------------------------------------------------------------
# Zones and tips
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('add_zone')
@json_login_required
def track_zones(request, track_id):
    data, error = _read_json(request)
    if error:
        return error
    form = TrackZoneForm(data)
    if not form.is_valid():
        return _validation_error(form)

    track = find_visible_track(request.user, track_id)
    if track is None:
        return _not_found('Track')

    zone = TrackZone.objects.create(
        track=track,
        name=form.cleaned_data['name'],
        description=form.cleaned_data['description'] or None,
        pos_x=form.cleaned_data['pos_x'],
        pos_y=form.cleaned_data['pos_y'],
        event_type=form.cleaned_data['event_type'] or None,
    )
    logger.info(f"User {request.user.pk} added zone {zone.pk} to track {track.pk}")
    return JsonResponse({'zone': serialize_zone(zone, tips=[])}, status=201)


@csrf_exempt
@require_http_methods(['PATCH', 'DELETE'])
@json_endpoint('zone')
@json_login_required
def zone_detail(request, track_id, zone_id):
    if request.method == 'DELETE':
        track = find_visible_track(request.user, track_id)
        if track is None:
            return _not_found('Track')
        zone = find_zone_on_track(track, zone_id)
        if zone is None:
            return _not_found('Zone')
        if not can_delete_zone(request.user, zone):
            return _error('Only the track owner can delete zones', 403)
        zone.delete()
        logger.info(f"User {request.user.pk} deleted zone {zone_id} from track {track_id}")
        return JsonResponse({'success': True})

    data, error = _read_json(request)
    if error:
        return error
    form = ZoneUpdateForm(data)
    if not form.is_valid():
        return _validation_error(form)

    track = find_visible_track(request.user, track_id)
    if track is None:
        return _not_found('Track')
    zone = find_zone_on_track(track, zone_id)
    if zone is None:
        return _not_found('Zone')
    if not can_edit_zone_text(request.user, zone):
        return _error('You cannot edit this zone', 403)

    if 'name' in data:
        zone.name = form.cleaned_data['name']
    if 'description' in data:
        zone.description = form.cleaned_data['description'] or None
    zone.save()
    logger.info(f"User {request.user.pk} updated zone {zone.pk}")
    return JsonResponse({'zone': serialize_zone(zone)})


@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('add_tip')
@json_login_required
def zone_tips(request, track_id, zone_id):
    data, error = _read_json(request)
    if error:
        return error
    form = ZoneTipForm(data)
    if not form.is_valid():
        return _validation_error(form)

    track = find_visible_track(request.user, track_id)
    if track is None:
        return _not_found('Track')
    zone = find_zone_on_track(track, zone_id)
    if zone is None:
        return _not_found('Zone')

    tip = ZoneTip.objects.create(
        zone=zone,
        author=request.user,
        content=form.cleaned_data['content'],
        conditions=form.cleaned_data['conditions'] or None,
    )
    logger.info(f"User {request.user.pk} added tip {tip.pk} to zone {zone.pk}")
    return JsonResponse({'tip': serialize_tip(tip)}, status=201)


# ---------------------------------------------------------------------------
# Lap book
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@json_endpoint('lapbook')
@json_login_required
def lapbook(request):
    if request.method == 'GET':
        form = LapRecordFilterForm(request.GET)
        if not form.is_valid():
            return _validation_error(form)
        records = list_lap_records(request.user, **form.cleaned_data)
        return JsonResponse({'lap_records': [serialize_lap_record(record) for record in records]})

    data, error = _read_json(request)
    if error:
        return error
    form = LapRecordForm(data)
    if not form.is_valid():
        return _validation_error(form)
    cleaned = form.cleaned_data

    car = find_owned_car(request.user, cleaned['car_id'])
    if car is None:
        return _not_found('Car')
    track = find_visible_track(request.user, cleaned['track_id'])
    if track is None:
        return _not_found('Track')
    event = None
    if cleaned['track_event_id']:
        event = _event_on_track(track, cleaned['track_event_id'])
        if event is None:
            return _not_found('Track event')

    telemetry = {field: cleaned[field] for field in LapRecord.TELEMETRY_FIELDS}
    record = LapRecord.objects.create(
        track=track,
        track_event=event,
        car=car,
        driver=request.user,
        lap_time=cleaned['lap_time'],
        conditions=cleaned['conditions'],
        notes=cleaned['notes'] or None,
        **telemetry,
    )
    logger.info(f"User {request.user.pk} logged lap {record.pk} at track {track.pk}")
    return JsonResponse({'lap_record': serialize_lap_record(record)}, status=201)


@csrf_exempt
@require_http_methods(['DELETE'])
@json_endpoint('delete_lap_record')
@json_login_required
def lap_record_detail(request, record_id):
    record = find_owned_lap_record(request.user, record_id)
    if record is None:
        return _not_found('Lap record')
    record.delete()
    logger.info(f"User {request.user.pk} deleted lap record {record_id}")
    return JsonResponse({'success': True})


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(['POST'])
@json_endpoint('upload')
@json_login_required
def upload(request):
    form = UploadForm(
        request.POST, request.FILES,
        allowed_types=settings.TRACKSIDE_UPLOAD_CONTENT_TYPES,
        max_bytes=settings.TRACKSIDE_UPLOAD_MAX_BYTES,
    )
    if not form.is_valid():
        return _validation_error(form)

    upload_file = form.cleaned_data['file']
    extension = os.path.splitext(upload_file.name)[1].lower()
    stored_name = default_storage.save(f"{uuid.uuid4().hex}{extension}", upload_file)
    url = default_storage.url(stored_name)
    logger.info(f"User {request.user.pk} uploaded {stored_name} ({upload_file.size} bytes)")
    return JsonResponse({'url': url}, status=201)
