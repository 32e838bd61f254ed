from unittest.mock import MagicMock, patch

from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from services.ride_management.tests import make_rider
from .views import health_check, verification_check


class HealthCheckTests(TestCase):
	def test_healthy_with_in_memory_layer(self):
		request = APIRequestFactory().get('/health/')
		response = health_check(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['services']['database'], 'healthy')
		self.assertEqual(response.data['services']['channels'], 'healthy')
		self.assertNotIn('redis', response.data['services'])


class VerificationCheckTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.user = make_rider()

	def post(self, payload):
		request = self.factory.post('/api/verification/check/', payload, format='json')
		force_authenticate(request, user=self.user)
		return verification_check(request)

	@patch('services.verification.engine.get_text_extractor')
	def test_hint_for_mismatched_aadhaar(self, mock_get_extractor):
		extractor = MagicMock()
		extractor.extract_text.return_value = 'Govt of India\n9876 5432 1098\n'
		mock_get_extractor.return_value = extractor

		response = self.post({'document_class': 'aadhar', 'identifier': '123456789012', 'photo': 'abc'})

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['extracted_identifier'], '987654321098')
		self.assertFalse(response.data['match']['is_match'])
		self.assertIn('Aadhaar number mismatch', response.data['hint'])

	def test_ocr_not_configured(self):
		response = self.post({'document_class': 'rc', 'identifier': 'DL12AB1234', 'photo': 'abc'})

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['error'], 'ocr_unavailable')

	def test_unsupported_document_class(self):
		response = self.post({'document_class': 'insurance', 'identifier': 'INS987654321', 'photo': 'abc'})

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'invalid_input')
