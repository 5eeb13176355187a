import uuid
from tempfile import TemporaryDirectory
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client, TestCase, override_settings
from django.urls import reverse

from .base import ApiTestCase


class AccessControlTests(TestCase):
    def setUp(self):
        self.client = Client()

    def test_protected_endpoints_require_auth(self):
        some_id = uuid.uuid4()
        protected = [
            ('get', reverse('profile')),
            ('get', reverse('cars')),
            ('post', reverse('cars')),
            ('put', reverse('car_detail', args=[some_id])),
            ('delete', reverse('car_detail', args=[some_id])),
            ('post', reverse('car_mods', args=[some_id])),
            ('delete', reverse('car_mod_detail', args=[some_id, some_id])),
            ('post', reverse('tracks')),
            ('patch', reverse('track_detail', args=[some_id])),
            ('post', reverse('track_images', args=[some_id])),
            ('delete', reverse('track_images', args=[some_id])),
            ('post', reverse('track_reviews', args=[some_id])),
            ('post', reverse('track_zones', args=[some_id])),
            ('patch', reverse('zone_detail', args=[some_id, some_id])),
            ('delete', reverse('zone_detail', args=[some_id, some_id])),
            ('post', reverse('zone_tips', args=[some_id, some_id])),
            ('get', reverse('lapbook')),
            ('post', reverse('lapbook')),
            ('delete', reverse('lap_record_detail', args=[some_id])),
            ('post', reverse('upload')),
        ]
        for method, url in protected:
            if method == 'get':
                resp = self.client.get(url)
            else:
                resp = getattr(self.client, method)(url, data='{}', content_type='application/json')
            self.assertEqual(resp.status_code, 401, f'{method.upper()} {url}')
            self.assertEqual(resp.json(), {'error': 'Unauthorized'})

    def test_public_reads(self):
        self.assertEqual(self.client.get(reverse('tracks')).status_code, 200)

    def test_wrong_method(self):
        resp = self.client.get(reverse('register'))
        self.assertEqual(resp.status_code, 405)


class UnexpectedFailureTests(ApiTestCase):
    def test_internal_errors_are_opaque(self):
        with mock.patch('community.views.list_cars', side_effect=RuntimeError('database is on fire')):
            with self.assertLogs('community.decorators', level='ERROR') as logs:
                resp = self.client.get(reverse('cars'))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {'error': 'Internal server error'})
        self.assertIn('cars', logs.output[0])


class UploadTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.media = TemporaryDirectory()
        self.addCleanup(self.media.cleanup)

    def test_upload_image(self):
        with override_settings(MEDIA_ROOT=self.media.name):
            upload = SimpleUploadedFile('layout.png', b'\x89PNG\r\n\x1a\n', content_type='image/png')
            resp = self.client.post(reverse('upload'), {'file': upload})
        self.assertEqual(resp.status_code, 201)
        url = resp.json()['url']
        self.assertTrue(url.startswith('/uploads/'))
        self.assertTrue(url.endswith('.png'))

    def test_rejects_other_types(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        resp = self.client.post(reverse('upload'), {'file': upload})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['fields']['file'], ['Invalid file type. Allowed: JPEG, PNG, WebP, SVG'])

    @override_settings(TRACKSIDE_UPLOAD_MAX_BYTES=4)
    def test_rejects_large_files(self):
        upload = SimpleUploadedFile('big.jpg', b'0123456789', content_type='image/jpeg')
        resp = self.client.post(reverse('upload'), {'file': upload})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['fields']['file'], ['File too large. Maximum size is 10MB'])

    def test_missing_file(self):
        resp = self.client.post(reverse('upload'), {})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('file', resp.json()['fields'])
