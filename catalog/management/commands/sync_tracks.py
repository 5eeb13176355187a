import json
import logging
import os

from django.conf import settings
from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from catalog.models import DriverProfile, Track, TrackEvent
from community.forms import TrackForm

logger = logging.getLogger(__name__)

SYSTEM_EMAIL = 'system@trackside.local'
SYSTEM_NAME = 'Trackside System'


def get_system_user():
    """The account that owns imported tracks; created without a usable password"""
    user, created = User.objects.get_or_create(
        username=SYSTEM_EMAIL, defaults={'email': SYSTEM_EMAIL}
    )
    if created:
        user.set_unusable_password()
        user.save()
    DriverProfile.objects.update_or_create(user=user, defaults={'name': SYSTEM_NAME})
    return user


class Command(BaseCommand):
    help = 'Import or refresh tracks from usa-tracks.json, matched by name and location'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            type=str,
            help='Path to the tracks file (default: TRACKSIDE_DATA_DIR/usa-tracks.json)',
        )

    def handle(self, *args, **options):
        path = options['file'] or os.path.join(settings.TRACKSIDE_DATA_DIR, 'usa-tracks.json')
        try:
            with open(path, encoding='utf-8') as f:
                payload = json.load(f)
        except OSError as e:
            raise CommandError(f"Could not read tracks data file {path}: {e}")
        except ValueError as e:
            raise CommandError(f"Invalid JSON in tracks data file {path}: {e}")

        entries = payload.get('tracks', []) if isinstance(payload, dict) else []
        system_user = get_system_user()
        created = updated = failed = 0
        errors = []

        for entry in entries:
            try:
                was_created = self.upsert_track(entry, system_user)
            except ValueError as e:
                failed += 1
                errors.append(f"{entry.get('name', '?') if isinstance(entry, dict) else '?'}: {e}")
                continue
            if was_created:
                created += 1
            else:
                updated += 1

        for message in errors:
            self.stdout.write(self.style.WARNING(f"Failed: {message}"))
        logger.info(f"Track sync: {len(entries)} total, {created} created, {updated} updated, {failed} failed")
        self.stdout.write(self.style.SUCCESS(
            f"Synced {len(entries)} tracks: {created} created, {updated} updated, {failed} failed"
        ))

    def upsert_track(self, entry, system_user):
        """Returns True when a new track was created, False when one was refreshed"""
        cleaned = self.clean_entry(entry)
        fields = {
            'state': cleaned['state'],
            'description': cleaned['description'] or None,
            'latitude': cleaned['latitude'],
            'longitude': cleaned['longitude'],
            'is_imported': True,
        }

        with transaction.atomic():
            track = Track.objects.filter(name=cleaned['name'], location=cleaned['location']).first()
            if track is not None:
                for field, value in fields.items():
                    setattr(track, field, value)
                track.save()
                return False

            track = Track.objects.create(
                name=cleaned['name'],
                location=cleaned['location'],
                status='APPROVED',
                uploaded_by=system_user,
                **fields,
            )
            for event_type in cleaned['event_types']:
                TrackEvent.objects.create(track=track, event_type=event_type)
            return True

    def clean_entry(self, entry):
        """Validate one file entry with the same rules as a submitted track"""
        if not isinstance(entry, dict):
            raise ValueError('entry is not an object')
        for key in ('name', 'location'):
            if not isinstance(entry.get(key), str):
                raise ValueError(f'{key} must be a string')

        types = entry.get('types') or []
        if isinstance(types, list):
            types = [str(t).upper() for t in types]
        form = TrackForm({
            'name': entry['name'],
            'location': entry['location'],
            'state': entry.get('state') or '',
            'description': entry.get('description') or '',
            'latitude': entry.get('latitude'),
            'longitude': entry.get('longitude'),
            'event_types': types,
        })
        if not form.is_valid():
            raise ValueError('; '.join(
                f"{field}: {' '.join(messages)}" for field, messages in form.errors.items()
            ))
        return form.cleaned_data
