import json

from django.contrib.auth.models import User
from django.test import Client, TestCase
from django.urls import reverse

from catalog.models import TrackReview

from .base import ApiTestCase


class RegisterLoginTests(TestCase):
    def setUp(self):
        self.client = Client()

    def register(self, **overrides):
        payload = {
            'name': 'Demo Driver',
            'email': 'Demo@Trackside.com',
            'password': 'password123',
            'confirm_password': 'password123',
        }
        payload.update(overrides)
        return self.client.post(reverse('register'), data=json.dumps(payload), content_type='application/json')

    def test_register_creates_user_with_profile(self):
        resp = self.register()
        self.assertEqual(resp.status_code, 201)
        data = resp.json()['user']
        self.assertEqual(data['email'], 'demo@trackside.com')
        self.assertEqual(data['name'], 'Demo Driver')

        user = User.objects.get(username='demo@trackside.com')
        self.assertEqual(user.driver_profile.name, 'Demo Driver')
        self.assertEqual(user.driver_profile.experience, 'BEGINNER')
        self.assertTrue(user.check_password('password123'))

    def test_duplicate_email_is_a_conflict(self):
        self.assertEqual(self.register().status_code, 201)
        resp = self.register(email='demo@trackside.com')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()['error'], 'Email already registered')
        self.assertEqual(User.objects.filter(username='demo@trackside.com').count(), 1)

    def test_register_reports_every_invalid_field(self):
        resp = self.register(name='D', email='not-an-email', password='short', confirm_password='short')
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body['error'], 'Validation failed')
        self.assertIn('name', body['fields'])
        self.assertIn('email', body['fields'])
        self.assertIn('password', body['fields'])
        self.assertFalse(User.objects.exists())

    def test_password_confirmation_must_match(self):
        resp = self.register(confirm_password='password124')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['fields']['confirm_password'], ['Passwords do not match'])

    def test_malformed_json_is_rejected(self):
        resp = self.client.post(reverse('register'), data='{"name": ', content_type='application/json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['error'], 'Invalid request body')

    def test_login_and_logout(self):
        self.register()
        resp = self.client.post(
            reverse('login'),
            data=json.dumps({'email': 'demo@trackside.com', 'password': 'password123'}),
            content_type='application/json',
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['user']['name'], 'Demo Driver')
        self.assertEqual(self.client.get(reverse('profile')).status_code, 200)

        resp = self.client.post(reverse('logout'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(reverse('profile')).status_code, 401)

    def test_login_with_wrong_password(self):
        self.register()
        resp = self.client.post(
            reverse('login'),
            data=json.dumps({'email': 'demo@trackside.com', 'password': 'wrong-password'}),
            content_type='application/json',
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()['error'], 'Invalid credentials')


class ProfileTests(ApiTestCase):
    def test_profile_includes_cars_and_counts(self):
        self.post_json(reverse('cars'), {'make': 'Nissan', 'model': '350Z', 'year': 2006})
        track = self.make_track()
        TrackReview.objects.create(track=track, author=self.user, rating=4, conditions='DRY')

        resp = self.client.get(reverse('profile'))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()['user']
        self.assertEqual(data['email'], 'driver@example.com')
        self.assertEqual(data['name'], 'Test Driver')
        self.assertEqual(len(data['cars']), 1)
        self.assertEqual(data['cars'][0]['mods'], [])
        self.assertEqual(data['counts'], {'track_reviews': 1, 'lap_records': 0, 'tracks': 1, 'zone_tips': 0})

    def test_update_profile(self):
        resp = self.put_json(reverse('profile'), {'name': 'Fast Driver', 'experience': 'ADVANCED'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['user']['experience'], 'ADVANCED')
        self.user.driver_profile.refresh_from_db()
        self.assertEqual(self.user.driver_profile.name, 'Fast Driver')

    def test_update_profile_rejects_unknown_experience(self):
        resp = self.put_json(reverse('profile'), {'name': 'Fast Driver', 'experience': 'LEGEND'})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('experience', resp.json()['fields'])
