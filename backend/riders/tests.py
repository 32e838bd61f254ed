from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from services.exceptions import DuplicateIdentifierError, ForbiddenError, InvalidInputError
from services.ride_management import book_ride, create_ride
from services.ride_management.tests import make_provider, make_rider, ride_data
from .models import RiderProfile
from .services import save_rider_profile
from .views import RiderBookingsView, RiderDetailsView


class RiderProfileServiceTests(TestCase):
	def setUp(self):
		self.rider = make_rider()

	def test_known_valid_aadhaar_is_verified(self):
		profile, created = save_rider_profile(self.rider, {'aadhar_number': '123456789012'})

		self.assertTrue(created)
		self.assertTrue(profile.aadhar_verified)

	def test_invalid_aadhaar_is_saved_unverified(self):
		profile, _ = save_rider_profile(self.rider, {'aadhar_number': '111122223333'})

		self.assertFalse(profile.aadhar_verified)
		self.assertTrue(RiderProfile.objects.filter(user=self.rider).exists())

	def test_aadhaar_required(self):
		with self.assertRaises(InvalidInputError):
			save_rider_profile(self.rider, {'live_photo': 'selfie'})

	def test_mobile_defaults_to_registered_number(self):
		profile, _ = save_rider_profile(self.rider, {'aadhar_number': '123456789012'})
		self.assertEqual(profile.mobile_number, '9000000002')

		profile, created = save_rider_profile(self.rider, {
			'aadhar_number': '123456789012',
			'mobile_number': '9111111111',
		})
		self.assertFalse(created)
		self.assertEqual(profile.mobile_number, '9111111111')

	def test_duplicate_aadhaar_across_riders(self):
		save_rider_profile(self.rider, {'aadhar_number': '987654321098'})
		other = make_rider('other')

		with self.assertRaises(DuplicateIdentifierError) as ctx:
			save_rider_profile(other, {'aadhar_number': '987654321098'})

		self.assertEqual(ctx.exception.field, 'aadhar_number')
		self.assertFalse(RiderProfile.objects.filter(user=other).exists())

	def test_provider_cannot_save_rider_details(self):
		with self.assertRaises(ForbiddenError):
			save_rider_profile(make_provider(with_profile=False), {'aadhar_number': '123456789012'})


class RiderViewTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.rider = make_rider()

	def test_post_and_get_details(self):
		request = self.factory.post('/api/rider/details/', {'aadhar_number': '123456789012'}, format='json')
		force_authenticate(request, user=self.rider)
		response = RiderDetailsView.as_view()(request)

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['verification'], {'aadhar_verified': True})

		request = self.factory.get('/api/rider/details/')
		force_authenticate(request, user=self.rider)
		response = RiderDetailsView.as_view()(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['rider']['aadhar_number'], '123456789012')

	def test_missing_details(self):
		request = self.factory.get('/api/rider/details/')
		force_authenticate(request, user=self.rider)
		response = RiderDetailsView.as_view()(request)

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.data['error'], 'not_found')

	def test_bookings_include_otp(self):
		provider = make_provider()
		ride = create_ride(provider, ride_data()).ride
		booking = book_ride(ride.id, self.rider).booking

		request = self.factory.get('/api/rider/bookings/')
		force_authenticate(request, user=self.rider)
		response = RiderBookingsView.as_view()(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['count'], 1)
		self.assertEqual(response.data['bookings'][0]['otp'], booking.otp)
		self.assertEqual(response.data['bookings'][0]['ride']['id'], ride.id)
