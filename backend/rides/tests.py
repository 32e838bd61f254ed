from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIRequestFactory, force_authenticate

from services.ride_management import create_ride
from services.ride_management.tests import make_provider, make_rider, ride_data
from .models import Booking, Ride
from .views import book_ride, cancel_booking, rides, search_rides


class RideViewTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.provider = make_provider()
		self.rider = make_rider()

	def test_provider_creates_ride(self):
		request = self.factory.post('/api/rides/', ride_data(), format='json')
		force_authenticate(request, user=self.provider)
		response = rides(request)

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['ride']['status'], 'created')
		self.assertEqual(response.data['ride']['vehicle_category'], 'Car')
		self.assertEqual(response.data['ride']['bookings'], [])

	def test_rider_cannot_create_ride(self):
		request = self.factory.post('/api/rides/', ride_data(), format='json')
		force_authenticate(request, user=self.rider)
		response = rides(request)

		self.assertEqual(response.status_code, 403)
		self.assertEqual(response.data['error'], 'forbidden')
		self.assertFalse(Ride.objects.exists())

	def test_provider_without_details(self):
		bare = make_provider('bare', with_profile=False)

		request = self.factory.post('/api/rides/', ride_data(), format='json')
		force_authenticate(request, user=bare)
		response = rides(request)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'profile_incomplete')

	def test_available_rides(self):
		upcoming = create_ride(self.provider, ride_data()).ride
		Ride.objects.create(
			provider=self.provider,
			vehicle_category='Car',
			start_point='Old',
			destination='Gone',
			start_time=timezone.now() - timedelta(hours=1),
			ride_cost=100,
		)

		request = self.factory.get('/api/rides/')
		force_authenticate(request, user=self.rider)
		response = rides(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual([r['id'] for r in response.data['rides']], [upcoming.id])
		self.assertNotIn('bookings', response.data['rides'][0])

	def test_search(self):
		create_ride(self.provider, ride_data(start_point='Saket', destination='Gurgaon'))
		create_ride(self.provider, ride_data(start_point='Noida', destination='Saket'))

		request = self.factory.get('/api/rides/search/', {'start_point': 'saket'})
		force_authenticate(request, user=self.rider)
		response = search_rides(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['count'], 1)
		self.assertEqual(response.data['rides'][0]['destination'], 'Gurgaon')


class BookingViewTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.provider = make_provider()
		self.rider = make_rider()
		self.ride = create_ride(self.provider, ride_data()).ride

	def book(self, user):
		request = self.factory.post('/api/rides/%d/book/' % self.ride.id)
		force_authenticate(request, user=user)
		return book_ride(request, ride_id=self.ride.id)

	def test_book_returns_otp(self):
		response = self.book(self.rider)

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['booking']['status'], 'accepted')
		self.assertEqual(len(response.data['booking']['otp']), 4)

		ride = response.data['ride']
		self.assertEqual(ride['id'], self.ride.id)
		self.assertEqual([b['id'] for b in ride['bookings']], [response.data['booking']['id']])
		self.assertNotIn('otp', ride['bookings'][0])

	def test_booking_response_hides_other_riders(self):
		self.book(make_rider('first'))
		response = self.book(self.rider)

		self.assertEqual(response.status_code, 201)
		self.assertEqual(len(response.data['ride']['bookings']), 1)
		self.assertEqual(response.data['ride']['bookings'][0]['rider']['id'], self.rider.id)

	def test_double_booking(self):
		first = self.book(self.rider)
		second = self.book(self.rider)

		self.assertEqual(second.status_code, 400)
		self.assertEqual(second.data['error'], 'already_booked')
		booking = Booking.objects.get(ride=self.ride, rider=self.rider)
		self.assertEqual(booking.otp, first.data['booking']['otp'])

	def test_provider_cannot_book(self):
		response = self.book(self.provider)
		self.assertEqual(response.status_code, 403)

	def test_book_unknown_ride(self):
		request = self.factory.post('/api/rides/999999/book/')
		force_authenticate(request, user=self.rider)
		response = book_ride(request, ride_id=999999)

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.data['error'], 'not_found')

	def test_cancel_booking(self):
		self.book(self.rider)

		request = self.factory.post('/api/rides/%d/cancel-booking/' % self.ride.id)
		force_authenticate(request, user=self.rider)
		response = cancel_booking(request, ride_id=self.ride.id)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['booking']['status'], 'canceled')
