from unittest.mock import MagicMock, patch

from django.db import IntegrityError
from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from accounts.models import User
from rides.models import Ride
from services.exceptions import DuplicateIdentifierError, OcrUnavailableError
from services.profile_store import upsert_profile
from services.ride_management import book_ride, create_ride, start_ride
from services.ride_management.tests import make_provider, make_rider, ride_data
from services.verification.extractor import OcrExtractionError
from .models import ProviderProfile
from .views import (
	ConfirmPickupView,
	ProviderDetailsView,
	ProviderRideDetailView,
	ProviderRidesView,
	RideLocationView,
	StartRideView,
)


def details_payload(**overrides):
	payload = {
		'vehicle_category': 'Car',
		'vehicle_type': 'Sedan',
		'vehicle_number': 'DL01AB0001',
		'rc_number': 'DL12AB1234',
		'insurance_number': 'INS987654321',
		'license_number': 'DL9876543210',
		'aadhar_number': '123456789012',
		'license_photo': 'data:image/png;base64,iVBORw0KGgo=',
	}
	payload.update(overrides)
	return payload


def fake_extractor(text='', error=None):
	extractor = MagicMock()
	if error is not None:
		extractor.extract_text.side_effect = error
	else:
		extractor.extract_text.return_value = text
	return extractor


class ProviderDetailsTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.provider = User.objects.create_user(
			username='john',
			password='Pass1234',
			role='provider',
			name='John Doe',
			mobile_number='9000000001',
		)

	def post(self, user, payload):
		request = self.factory.post('/api/provider/details/', payload, format='json')
		force_authenticate(request, user=user)
		return ProviderDetailsView.as_view()(request)

	def test_car_requires_vehicle_type(self):
		response = self.post(self.provider, details_payload(vehicle_type=''))

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'invalid_input')
		self.assertIn('vehicle_type', response.data['errors'])
		self.assertFalse(ProviderProfile.objects.exists())

	def test_bike_drops_vehicle_type(self):
		response = self.post(self.provider, details_payload(vehicle_category='Bike'))

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['provider']['vehicle_type'], '')

	def test_rider_cannot_submit_provider_details(self):
		rider = make_rider()
		response = self.post(rider, details_payload())

		self.assertEqual(response.status_code, 403)
		self.assertEqual(response.data['error'], 'forbidden')

	@patch('services.verification.engine.get_text_extractor')
	def test_ocr_name_mismatch_keeps_other_flags(self, mock_get_extractor):
		mock_get_extractor.return_value = fake_extractor('Name: Johnny Doe\nDL Number: DL9876543210\n')

		response = self.post(self.provider, details_payload())

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['verification'], {
			'rc_verified': True,
			'insurance_verified': True,
			'license_verified': False,
			'aadhar_verified': True,
		})
		self.assertEqual(response.data['provider']['ocr_extracted_name'], 'Johnny Doe')

	@patch('services.verification.engine.get_text_extractor')
	def test_matching_license_is_verified(self, mock_get_extractor):
		mock_get_extractor.return_value = fake_extractor(
			'Name: John Doe\nDL Number: DL9876543210\nDOB: 1990-05-15\nValid Till: 2030-05-15\n'
		)

		response = self.post(self.provider, details_payload())

		profile = ProviderProfile.objects.get(user=self.provider)
		self.assertEqual(response.status_code, 201)
		self.assertTrue(profile.license_verified)
		self.assertTrue(profile.is_fully_verified)
		self.assertEqual(profile.ocr_extracted_validity, '2030-05-15')

	@patch('services.verification.engine.get_text_extractor')
	def test_ocr_failure_saves_nothing(self, mock_get_extractor):
		mock_get_extractor.return_value = fake_extractor(error=OcrExtractionError('unreadable'))

		response = self.post(self.provider, details_payload())

		self.assertEqual(response.status_code, 422)
		self.assertEqual(response.data['error'], 'ocr_processing_failed')
		self.assertFalse(ProviderProfile.objects.exists())

	@patch('services.verification.engine.get_text_extractor')
	def test_ocr_unavailable_still_saves(self, mock_get_extractor):
		mock_get_extractor.return_value = fake_extractor(error=OcrUnavailableError())

		response = self.post(self.provider, details_payload())

		self.assertEqual(response.status_code, 201)
		self.assertFalse(response.data['verification']['license_verified'])
		self.assertTrue(response.data['verification']['rc_verified'])

	def test_resubmission_overwrites_flags(self):
		self.post(self.provider, details_payload())
		response = self.post(self.provider, details_payload(rc_number='UP56CD5678'))

		self.assertEqual(response.status_code, 200)
		self.assertFalse(response.data['verification']['rc_verified'])
		self.assertEqual(ProviderProfile.objects.count(), 1)
		self.assertEqual(ProviderProfile.objects.get().rc_number, 'UP56CD5678')

	def test_duplicate_aadhar_across_providers(self):
		self.post(self.provider, details_payload())
		other = make_provider('other', with_profile=False)

		response = self.post(other, details_payload(
			vehicle_number='DL01AB0002',
			rc_number='UP56CD5678',
			insurance_number='INS123456789',
			license_number='DL0123456789',
		))

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'duplicate_identifier')
		self.assertEqual(response.data['field'], 'aadhar_number')
		self.assertFalse(ProviderProfile.objects.filter(user=other).exists())

	def test_get_details(self):
		request = self.factory.get('/api/provider/details/')
		force_authenticate(request, user=self.provider)
		response = ProviderDetailsView.as_view()(request)
		self.assertEqual(response.status_code, 404)

		self.post(self.provider, details_payload())
		request = self.factory.get('/api/provider/details/')
		force_authenticate(request, user=self.provider)
		response = ProviderDetailsView.as_view()(request)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['provider']['rc_number'], 'DL12AB1234')


class ProviderRideViewTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.provider = make_provider()
		self.rider = make_rider()
		self.ride = create_ride(self.provider, ride_data()).ride
		self.booking = book_ride(self.ride.id, self.rider).booking

	def test_list_includes_bookings_without_otp(self):
		request = self.factory.get('/api/provider/rides/')
		force_authenticate(request, user=self.provider)
		response = ProviderRidesView.as_view()(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['count'], 1)
		booking = response.data['rides'][0]['bookings'][0]
		self.assertEqual(booking['rider']['name'], 'Rita Rider')
		self.assertNotIn('otp', booking)

	def test_riders_cannot_list_provider_rides(self):
		request = self.factory.get('/api/provider/rides/')
		force_authenticate(request, user=self.rider)
		response = ProviderRidesView.as_view()(request)
		self.assertEqual(response.status_code, 403)

	def test_delete_started_ride(self):
		start_ride(self.ride.id, self.provider)

		request = self.factory.delete('/api/provider/rides/%d/' % self.ride.id)
		force_authenticate(request, user=self.provider)
		response = ProviderRideDetailView.as_view()(request, ride_id=self.ride.id)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'invalid_state')
		self.assertTrue(Ride.objects.filter(id=self.ride.id).exists())

	def test_start_then_confirm_pickup(self):
		request = self.factory.post('/api/provider/rides/%d/start/' % self.ride.id)
		force_authenticate(request, user=self.provider)
		response = StartRideView.as_view()(request, ride_id=self.ride.id)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['ride']['status'], 'started')

		request = self.factory.post(
			'/api/provider/rides/%d/confirm-pickup/' % self.ride.id,
			{'rider_id': self.rider.id, 'otp': self.booking.otp},
			format='json',
		)
		force_authenticate(request, user=self.provider)
		response = ConfirmPickupView.as_view()(request, ride_id=self.ride.id)

		self.assertEqual(response.status_code, 200)
		self.booking.refresh_from_db()
		self.assertEqual(self.booking.status, 'in-ride')

	def test_location_out_of_range(self):
		start_ride(self.ride.id, self.provider)

		request = self.factory.post(
			'/api/provider/rides/%d/location/' % self.ride.id,
			{'latitude': 120, 'longitude': 77.2},
			format='json',
		)
		force_authenticate(request, user=self.provider)
		response = RideLocationView.as_view()(request, ride_id=self.ride.id)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'invalid_input')

	def test_other_provider_forbidden(self):
		other = make_provider('other')

		request = self.factory.post('/api/provider/rides/%d/start/' % self.ride.id)
		force_authenticate(request, user=other)
		response = StartRideView.as_view()(request, ride_id=self.ride.id)

		self.assertEqual(response.status_code, 403)
		self.assertEqual(response.data['error'], 'forbidden')


class ProfileStoreTests(TestCase):
	def setUp(self):
		self.provider = make_provider('racer', with_profile=False)
		self.fields = {
			'vehicle_category': 'Bike',
			'vehicle_type': '',
			'vehicle_number': 'DL01AB0009',
			'rc_number': 'RC-RACE',
			'insurance_number': 'INS-RACE',
			'license_number': 'DL-RACE',
			'aadhar_number': 'AAD-RACE',
		}
		self.user_conflict = IntegrityError('UNIQUE constraint failed: providers_providerprofile.user_id')

	def test_concurrent_first_save_is_retried(self):
		real_update_or_create = ProviderProfile.objects.update_or_create
		calls = []

		def lose_first_insert(**kwargs):
			calls.append(kwargs)
			if len(calls) == 1:
				raise self.user_conflict
			return real_update_or_create(**kwargs)

		with patch.object(ProviderProfile.objects, 'update_or_create', side_effect=lose_first_insert):
			profile, _ = upsert_profile(ProviderProfile, self.provider, self.fields, ProviderProfile.IDENTIFIER_FIELDS)

		self.assertEqual(len(calls), 2)
		self.assertEqual(ProviderProfile.objects.get(user=self.provider).pk, profile.pk)
		self.assertEqual(profile.rc_number, 'RC-RACE')

	def test_repeated_user_conflict_is_raised(self):
		with patch.object(ProviderProfile.objects, 'update_or_create', side_effect=self.user_conflict) as mock_upsert:
			with self.assertRaises(IntegrityError):
				upsert_profile(ProviderProfile, self.provider, self.fields, ProviderProfile.IDENTIFIER_FIELDS)

		self.assertEqual(mock_upsert.call_count, 2)

	def test_identifier_conflict_is_not_retried(self):
		error = IntegrityError('UNIQUE constraint failed: providers_providerprofile.rc_number')
		with patch.object(ProviderProfile.objects, 'update_or_create', side_effect=error) as mock_upsert:
			with self.assertRaises(DuplicateIdentifierError) as ctx:
				upsert_profile(ProviderProfile, self.provider, self.fields, ProviderProfile.IDENTIFIER_FIELDS)

		self.assertEqual(mock_upsert.call_count, 1)
		self.assertEqual(ctx.exception.field, 'rc_number')
