from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError
from django.test import TestCase
from django.urls import reverse

from catalog.models import Car, DriverProfile, LapRecord, Track, TrackEvent, TrackReview, TrackZone


class DriverProfileSignalTests(TestCase):
    def test_profile_created_with_user(self):
        user = User.objects.create_user(username='a@example.com', email='a@example.com', password='x' * 10)
        profile = DriverProfile.objects.get(user=user)
        self.assertEqual(profile.experience, 'BEGINNER')
        self.assertEqual(str(profile), 'a@example.com')


class TrackModelTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='u@example.com', email='u@example.com', password='x' * 10)
        self.track = Track.objects.create(name='Laguna Seca', location='Monterey, CA', uploaded_by=self.user)

    def test_average_rating_without_reviews_is_zero(self):
        self.assertEqual(self.track.average_rating(), 0.0)

    def test_average_rating_is_mean(self):
        for rating in (5, 4, 4, 2):
            TrackReview.objects.create(track=self.track, author=self.user, rating=rating, conditions='DRY')
        self.assertEqual(self.track.average_rating(), 3.75)

    def test_new_tracks_are_approved(self):
        self.assertEqual(self.track.status, 'APPROVED')
        self.assertFalse(self.track.is_imported)

    def test_name_and_location_unique(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Track.objects.create(name='Laguna Seca', location='Monterey, CA', uploaded_by=self.user)
        Track.objects.create(name='Laguna Seca', location='Elsewhere', uploaded_by=self.user)

    def test_event_type_unique_per_track(self):
        TrackEvent.objects.create(track=self.track, event_type='DRIFT')
        with self.assertRaises(IntegrityError), transaction.atomic():
            TrackEvent.objects.create(track=self.track, event_type='DRIFT')

    def test_zone_position_constraint(self):
        TrackZone.objects.create(track=self.track, name='Edge', pos_x=100, pos_y=0)
        with self.assertRaises(IntegrityError), transaction.atomic():
            TrackZone.objects.create(track=self.track, name='Off', pos_x=100.5, pos_y=0)

    def test_rating_constraint(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            TrackReview.objects.create(track=self.track, author=self.user, rating=6, conditions='DRY')

    def test_uploader_cannot_be_deleted_while_owning_tracks(self):
        with self.assertRaises(ProtectedError):
            self.user.delete()

    def test_deleting_event_keeps_lap_records(self):
        event = TrackEvent.objects.create(track=self.track, event_type='ROADCOURSE')
        car = Car.objects.create(owner=self.user, make='Nissan', model='350Z', year=2006)
        record = LapRecord.objects.create(track=self.track, track_event=event, car=car, driver=self.user,
                                          lap_time='1:42.856', conditions='DRY')
        event.delete()
        record.refresh_from_db()
        self.assertIsNone(record.track_event)


class CarModelTests(TestCase):
    def test_year_constraint(self):
        user = User.objects.create_user(username='c@example.com', email='c@example.com', password='x' * 10)
        Car.objects.create(owner=user, make='Ford', model='Model T', year=1900)
        with self.assertRaises(IntegrityError), transaction.atomic():
            Car.objects.create(owner=user, make='Ford', model='Model T', year=1899)


class ModerationAdminTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(username='admin', email='admin@example.com', password='x' * 10)
        self.client.login(username='admin', password='x' * 10)
        self.track = Track.objects.create(name='Laguna Seca', location='Monterey, CA', uploaded_by=self.admin)

    def run_action(self, action):
        return self.client.post(
            reverse('admin:catalog_track_changelist'),
            {'action': action, '_selected_action': [str(self.track.pk)]},
        )

    def test_reject_then_approve(self):
        resp = self.run_action('reject_tracks')
        self.assertEqual(resp.status_code, 302)
        self.track.refresh_from_db()
        self.assertEqual(self.track.status, 'REJECTED')

        self.run_action('approve_tracks')
        self.track.refresh_from_db()
        self.assertEqual(self.track.status, 'APPROVED')
