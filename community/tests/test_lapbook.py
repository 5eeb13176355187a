import json

from django.test import Client, TestCase
from django.urls import reverse

from catalog.models import Car, LapRecord

from .base import ApiTestCase


class LapRecordTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.car = Car.objects.create(owner=self.user, make='Nissan', model='350Z', year=2006)
        self.track = self.make_track(event_types=['ROADCOURSE', 'DRIFT'])

    def lap(self, **overrides):
        payload = {
            'lap_time': '1:42.856',
            'conditions': 'DRY',
            'car_id': str(self.car.pk),
            'track_id': str(self.track.pk),
        }
        payload.update(overrides)
        return payload

    def test_log_lap_with_telemetry(self):
        event = self.track.events.get(event_type='ROADCOURSE')
        resp = self.post_json(reverse('lapbook'), self.lap(
            track_event_id=str(event.pk),
            tire_pressure_fl=32.5, fuel_level=0, camber_fl=-2.5, toe_rr=0.15,
        ))
        self.assertEqual(resp.status_code, 201)
        record = resp.json()['lap_record']
        self.assertEqual(record['lap_time'], '1:42.856')
        self.assertEqual(record['tire_pressure_fl'], 32.5)
        self.assertEqual(record['camber_fl'], -2.5)
        self.assertEqual(record['fuel_level'], 0)
        self.assertIsNone(record['caster_fr'])
        self.assertEqual(record['track']['name'], 'Laguna Seca')
        self.assertEqual(record['car']['model'], '350Z')
        self.assertEqual(record['track_event']['event_type'], 'ROADCOURSE')

    def test_telemetry_ranges(self):
        resp = self.post_json(reverse('lapbook'), self.lap(tire_pressure_rr=0, fuel_level=-1))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(set(resp.json()['fields']), {'tire_pressure_rr', 'fuel_level'})

    def test_car_must_be_owned(self):
        other = self.make_user('other@example.com')
        car = Car.objects.create(owner=other, make='Mazda', model='MX-5', year=1990)
        resp = self.post_json(reverse('lapbook'), self.lap(car_id=str(car.pk)))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['error'], 'Car not found')
        self.assertFalse(LapRecord.objects.exists())

    def test_track_must_exist(self):
        resp = self.post_json(reverse('lapbook'), self.lap(track_id='00000000-0000-0000-0000-000000000000'))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['error'], 'Track not found')
        self.assertFalse(LapRecord.objects.exists())

    def test_event_must_belong_to_track(self):
        other_track = self.make_track('Sonoma Raceway', 'Sonoma, CA', event_types=['DRAG'])
        resp = self.post_json(reverse('lapbook'), self.lap(track_event_id=str(other_track.events.get().pk)))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['error'], 'Track event not found')

    def test_filters(self):
        drift = self.track.events.get(event_type='DRIFT')
        other_car = Car.objects.create(owner=self.user, make='Honda', model='S2000', year=2004)
        LapRecord.objects.create(track=self.track, car=self.car, driver=self.user, lap_time='1:40.000', conditions='DRY')
        LapRecord.objects.create(track=self.track, track_event=drift, car=other_car, driver=self.user,
                                 lap_time='0:55.000', conditions='WET')

        def lap_times(**params):
            resp = self.client.get(reverse('lapbook'), params)
            self.assertEqual(resp.status_code, 200)
            return sorted(r['lap_time'] for r in resp.json()['lap_records'])

        self.assertEqual(lap_times(), ['0:55.000', '1:40.000'])
        self.assertEqual(lap_times(car_id=str(self.car.pk)), ['1:40.000'])
        self.assertEqual(lap_times(event_type='DRIFT'), ['0:55.000'])
        self.assertEqual(lap_times(track_id=str(self.track.pk), car_id=str(other_car.pk)), ['0:55.000'])

    def test_delete_own_lap_only(self):
        record = LapRecord.objects.create(track=self.track, car=self.car, driver=self.user,
                                          lap_time='1:40.000', conditions='DRY')
        other = self.as_user(self.make_user('other@example.com'))
        url = reverse('lap_record_detail', args=[record.pk])
        self.assertEqual(other.delete(url).status_code, 404)
        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertFalse(LapRecord.objects.exists())


class DemoDriverScenarioTests(TestCase):
    """Register, build a garage and a track, then log a lap end to end"""

    def setUp(self):
        self.client = Client()

    def post(self, url, payload, client=None):
        return (client or self.client).post(url, data=json.dumps(payload), content_type='application/json')

    def test_full_flow(self):
        resp = self.post(reverse('register'), {
            'name': 'Demo Driver', 'email': 'demo@trackside.com',
            'password': 'password123', 'confirm_password': 'password123',
        })
        self.assertEqual(resp.status_code, 201)
        resp = self.post(reverse('login'), {'email': 'demo@trackside.com', 'password': 'password123'})
        self.assertEqual(resp.status_code, 200)

        car = self.post(reverse('cars'), {'make': 'Nissan', 'model': '350Z', 'year': 2006}).json()['car']
        resp = self.post(reverse('car_mods', args=[car['id']]), {'name': 'Coilovers', 'category': 'SUSPENSION'})
        self.assertEqual(resp.status_code, 201)

        track = self.post(reverse('tracks'), {
            'name': 'Laguna Seca', 'location': 'Monterey, CA', 'event_types': ['ROADCOURSE'],
        }).json()['track']
        zone = self.post(reverse('track_zones', args=[track['id']]),
                         {'name': 'Corkscrew', 'pos_x': 65, 'pos_y': 25}).json()['zone']
        resp = self.post(reverse('zone_tips', args=[track['id'], zone['id']]),
                         {'content': 'Use the tree as a marker', 'conditions': 'DRY'})
        self.assertEqual(resp.status_code, 201)
        resp = self.post(reverse('track_reviews', args=[track['id']]), {'rating': 5, 'conditions': 'DRY'})
        self.assertEqual(resp.status_code, 201)

        detail = self.client.get(reverse('track_detail', args=[track['id']])).json()['track']
        self.assertEqual(detail['avg_rating'], 5.0)
        self.assertEqual(detail['counts']['reviews'], 1)
        self.assertEqual(detail['zones'][0]['tips'][0]['content'], 'Use the tree as a marker')
        self.assertEqual(detail['reviews'][0]['author']['car']['model'], '350Z')

        resp = self.post(reverse('lapbook'), {
            'lap_time': '1:42.856', 'conditions': 'DRY', 'car_id': car['id'], 'track_id': track['id'],
        })
        self.assertEqual(resp.status_code, 201)

        mine = self.client.get(reverse('lapbook'), {'car_id': car['id']}).json()['lap_records']
        self.assertEqual([r['lap_time'] for r in mine], ['1:42.856'])

        other = Client()
        self.post(reverse('register'), {
            'name': 'Other Driver', 'email': 'other@trackside.com',
            'password': 'password123', 'confirm_password': 'password123',
        }, client=other)
        other.login(username='other@trackside.com', password='password123')
        theirs = other.get(reverse('lapbook')).json()['lap_records']
        self.assertEqual(theirs, [])
