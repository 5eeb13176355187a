import json
import os
from io import StringIO
from tempfile import TemporaryDirectory

from django.contrib.auth.models import User
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from catalog.models import Car, LapRecord, Track, TrackEvent, TrackReview


class SeedDemoTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command('seed_demo', stdout=out)
        self.assertIn('Seed complete', out.getvalue())

        user = User.objects.get(username='demo@trackside.com')
        self.assertEqual(user.driver_profile.name, 'Demo Driver')
        car = Car.objects.get(owner=user)
        self.assertEqual((car.make, car.model, car.year), ('Nissan', '350Z', 2006))
        self.assertEqual(car.mods.count(), 5)
        laguna = Track.objects.get(name='Laguna Seca')
        self.assertEqual(laguna.zones.count(), 3)
        self.assertEqual(laguna.average_rating(), 5.0)
        self.assertEqual(LapRecord.objects.count(), 2)

        out = StringIO()
        call_command('seed_demo', stdout=out)
        self.assertIn('already seeded', out.getvalue())
        self.assertEqual(Track.objects.count(), 2)
        self.assertEqual(TrackReview.objects.count(), 1)


class SyncTracksTests(TestCase):
    def setUp(self):
        self.tmp = TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = os.path.join(self.tmp.name, 'usa-tracks.json')

    def write(self, tracks):
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({'tracks': tracks}, f)

    def sync(self):
        out = StringIO()
        call_command('sync_tracks', file=self.path, stdout=out)
        return out.getvalue()

    def test_creates_then_updates(self):
        self.write([
            {'name': 'Road Atlanta', 'location': 'Braselton, GA', 'state': 'ga',
             'types': ['roadcourse'], 'latitude': 34.15, 'longitude': -83.81, 'description': 'Fast'},
            {'name': 'Bad Track', 'location': 'Nowhere', 'types': ['GRIP']},
        ])
        output = self.sync()
        self.assertIn('1 created, 0 updated, 1 failed', output)

        track = Track.objects.get(name='Road Atlanta')
        self.assertTrue(track.is_imported)
        self.assertEqual(track.state, 'GA')
        self.assertEqual(track.status, 'APPROVED')
        self.assertEqual(track.uploaded_by.username, 'system@trackside.local')
        self.assertEqual(track.uploaded_by.driver_profile.name, 'Trackside System')
        self.assertEqual(list(track.events.values_list('event_type', flat=True)), ['ROADCOURSE'])

        self.write([
            {'name': 'Road Atlanta', 'location': 'Braselton, GA', 'state': 'GA',
             'types': ['ROADCOURSE'], 'latitude': 34.15, 'longitude': -83.81, 'description': 'Very fast'},
        ])
        output = self.sync()
        self.assertIn('0 created, 1 updated, 0 failed', output)
        track.refresh_from_db()
        self.assertEqual(track.description, 'Very fast')
        self.assertEqual(Track.objects.count(), 1)
        self.assertEqual(TrackEvent.objects.count(), 1)

    def test_out_of_range_entry_is_not_stored(self):
        self.write([
            {'name': 'Bogus', 'location': 'Somewhere', 'state': 'California',
             'latitude': 500, 'longitude': -999, 'types': ['DRAG']},
        ])
        output = self.sync()
        self.assertIn('0 created, 0 updated, 1 failed', output)
        self.assertIn('state', output)
        self.assertIn('latitude', output)
        self.assertIn('longitude', output)
        self.assertFalse(Track.objects.exists())

    def test_invalid_update_leaves_track_untouched(self):
        self.write([{'name': 'Road Atlanta', 'location': 'Braselton, GA', 'state': 'GA',
                     'types': ['ROADCOURSE'], 'latitude': 34.15, 'longitude': -83.81}])
        self.sync()
        self.write([{'name': 'Road Atlanta', 'location': 'Braselton, GA', 'state': 'GA',
                     'types': ['ROADCOURSE'], 'latitude': 95, 'longitude': -83.81}])
        output = self.sync()
        self.assertIn('0 created, 0 updated, 1 failed', output)
        self.assertEqual(Track.objects.get().latitude, 34.15)

    def test_malformed_entry_after_good_one_is_counted(self):
        self.write([
            {'name': 'Good', 'location': 'Somewhere, TX', 'types': ['AUTOCROSS']},
            {'name': 123, 'location': 'Elsewhere, TX', 'types': ['AUTOCROSS']},
            'not an object',
        ])
        output = self.sync()
        self.assertIn('1 created, 0 updated, 2 failed', output)
        self.assertIn('name must be a string', output)
        self.assertEqual(list(Track.objects.values_list('name', flat=True)), ['Good'])

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('sync_tracks', file=os.path.join(self.tmp.name, 'missing.json'), stdout=StringIO())
