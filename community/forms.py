"""
Inbound payload validation.

Every mutation and every filtered listing runs its payload through one of the
forms below before touching the database. A form reports all offending fields
at once via ``form.errors``.
"""
from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import URLValidator

from catalog.models import (
    CAR_YEAR_MAX, CAR_YEAR_MIN, DRIVING_CONDITIONS, EVENT_TYPES, EXPERIENCE_LEVELS,
    MOD_CATEGORIES, ZONE_POSITION_MAX, ZONE_POSITION_MIN,
)


def validate_positive(value):
    if value is not None and value <= 0:
        raise ValidationError('Must be greater than 0.', code='min_value')


def validate_image_reference(value):
    """Accept an absolute URL or a site-relative path such as /uploads/layout.png"""
    if value.startswith('/'):
        return
    try:
        URLValidator()(value)
    except ValidationError:
        raise ValidationError('Invalid image URL', code='invalid')


class RegisterForm(forms.Form):
    name = forms.CharField(
        min_length=2, max_length=100,
        error_messages={'required': 'Name must be at least 2 characters',
                        'min_length': 'Name must be at least 2 characters'},
    )
    email = forms.EmailField(error_messages={'invalid': 'Invalid email address'})
    password = forms.CharField(
        min_length=8, strip=False,
        error_messages={'min_length': 'Password must be at least 8 characters'},
    )
    confirm_password = forms.CharField(strip=False)

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        confirm = cleaned_data.get('confirm_password')
        if password and confirm and password != confirm:
            self.add_error('confirm_password', 'Passwords do not match')
        return cleaned_data


class LoginForm(forms.Form):
    email = forms.EmailField(error_messages={'invalid': 'Invalid email address'})
    password = forms.CharField(strip=False, error_messages={'required': 'Password is required'})

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()


class ProfileForm(forms.Form):
    name = forms.CharField(
        min_length=2, max_length=100,
        error_messages={'min_length': 'Name must be at least 2 characters'},
    )
    experience = forms.ChoiceField(choices=EXPERIENCE_LEVELS)


class CarForm(forms.Form):
    make = forms.CharField(max_length=100, error_messages={'required': 'Make is required'})
    model = forms.CharField(max_length=100, error_messages={'required': 'Model is required'})
    year = forms.IntegerField(min_value=CAR_YEAR_MIN, max_value=CAR_YEAR_MAX)


class CarModForm(forms.Form):
    name = forms.CharField(max_length=200, error_messages={'required': 'Mod name is required'})
    category = forms.ChoiceField(choices=MOD_CATEGORIES)
    notes = forms.CharField(required=False)


class TrackForm(forms.Form):
    name = forms.CharField(
        min_length=2, max_length=200,
        error_messages={'required': 'Track name is required', 'min_length': 'Track name is required'},
    )
    location = forms.CharField(
        min_length=2, max_length=200,
        error_messages={'required': 'Location is required', 'min_length': 'Location is required'},
    )
    state = forms.CharField(required=False, min_length=2, max_length=2)
    description = forms.CharField(required=False)
    image_url = forms.CharField(required=False, max_length=500, validators=[validate_image_reference])
    latitude = forms.FloatField(required=False, min_value=-90, max_value=90)
    longitude = forms.FloatField(required=False, min_value=-180, max_value=180)
    event_types = forms.MultipleChoiceField(
        choices=EVENT_TYPES,
        error_messages={'required': 'Select at least one event type'},
    )

    def clean_state(self):
        state = self.cleaned_data.get('state')
        if not state:
            return None
        if not state.isalpha():
            raise ValidationError('State must be a two-letter code')
        return state.upper()

    def clean_event_types(self):
        # Keep submission order, drop repeats
        return list(dict.fromkeys(self.cleaned_data['event_types']))


class TrackUpdateForm(forms.Form):
    """Partial update; only keys present in the payload are applied"""
    name = forms.CharField(required=False, min_length=2, max_length=200)
    location = forms.CharField(required=False, min_length=2, max_length=200)
    description = forms.CharField(required=False)
    image_url = forms.CharField(required=False, max_length=500, validators=[validate_image_reference])

    def __init__(self, data, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        for name in ('name', 'location'):
            # Present-but-empty is not the same as absent
            if name in data:
                self.fields[name].required = True


class TrackImageForm(forms.Form):
    url = forms.CharField(max_length=500, validators=[validate_image_reference],
                          error_messages={'required': 'Invalid image URL'})
    caption = forms.CharField(required=False, max_length=300)


class TrackZoneForm(forms.Form):
    name = forms.CharField(max_length=200, error_messages={'required': 'Zone name is required'})
    description = forms.CharField(required=False)
    pos_x = forms.FloatField(min_value=ZONE_POSITION_MIN, max_value=ZONE_POSITION_MAX)
    pos_y = forms.FloatField(min_value=ZONE_POSITION_MIN, max_value=ZONE_POSITION_MAX)
    event_type = forms.ChoiceField(choices=EVENT_TYPES, required=False)


class ZoneUpdateForm(forms.Form):
    name = forms.CharField(required=False, max_length=200)
    description = forms.CharField(required=False)

    def __init__(self, data, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        if 'name' in data:
            self.fields['name'].required = True


class ZoneTipForm(forms.Form):
    content = forms.CharField(error_messages={'required': 'Tip content is required'})
    conditions = forms.ChoiceField(choices=DRIVING_CONDITIONS, required=False)


class TrackReviewForm(forms.Form):
    rating = forms.IntegerField(min_value=1, max_value=5)
    content = forms.CharField(required=False)
    conditions = forms.ChoiceField(choices=DRIVING_CONDITIONS)
    track_event_id = forms.UUIDField(required=False)


class LapRecordForm(forms.Form):
    lap_time = forms.CharField(max_length=20, error_messages={'required': 'Lap time is required'})
    conditions = forms.ChoiceField(choices=DRIVING_CONDITIONS)
    notes = forms.CharField(required=False)

    tire_pressure_fl = forms.FloatField(required=False, validators=[validate_positive])
    tire_pressure_fr = forms.FloatField(required=False, validators=[validate_positive])
    tire_pressure_rl = forms.FloatField(required=False, validators=[validate_positive])
    tire_pressure_rr = forms.FloatField(required=False, validators=[validate_positive])
    fuel_level = forms.FloatField(required=False, min_value=0)

    camber_fl = forms.FloatField(required=False)
    camber_fr = forms.FloatField(required=False)
    camber_rl = forms.FloatField(required=False)
    camber_rr = forms.FloatField(required=False)
    caster_fl = forms.FloatField(required=False)
    caster_fr = forms.FloatField(required=False)
    toe_fl = forms.FloatField(required=False)
    toe_fr = forms.FloatField(required=False)
    toe_rl = forms.FloatField(required=False)
    toe_rr = forms.FloatField(required=False)

    track_id = forms.UUIDField()
    track_event_id = forms.UUIDField(required=False)
    car_id = forms.UUIDField()


class TrackFilterForm(forms.Form):
    search = forms.CharField(required=False)
    event_type = forms.ChoiceField(choices=EVENT_TYPES, required=False)
    state = forms.CharField(required=False, max_length=2)

    def clean_state(self):
        return self.cleaned_data.get('state', '').upper()


class TrackDetailFilterForm(forms.Form):
    event_type = forms.ChoiceField(choices=EVENT_TYPES, required=False)


class LapRecordFilterForm(forms.Form):
    track_id = forms.UUIDField(required=False)
    car_id = forms.UUIDField(required=False)
    event_type = forms.ChoiceField(choices=EVENT_TYPES, required=False)


class UploadForm(forms.Form):
    file = forms.FileField(error_messages={'required': 'No file provided'})

    def __init__(self, *args, allowed_types=(), max_bytes=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.allowed_types = allowed_types
        self.max_bytes = max_bytes

    def clean_file(self):
        upload = self.cleaned_data['file']
        if upload.content_type not in self.allowed_types:
            raise ValidationError('Invalid file type. Allowed: JPEG, PNG, WebP, SVG')
        if self.max_bytes is not None and upload.size > self.max_bytes:
            raise ValidationError('File too large. Maximum size is 10MB')
        return upload
