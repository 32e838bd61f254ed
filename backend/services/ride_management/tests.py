from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.db import IntegrityError, transaction
from django.test import TestCase, override_settings
from django.utils import timezone

from accounts.models import User
from providers.models import ProviderProfile
from rides.models import Booking, Ride
from services.exceptions import (
	AlreadyBookedError,
	ForbiddenError,
	InvalidInputError,
	InvalidStateError,
	NotFoundError,
	ProfileIncompleteError,
)
from services.ride_management import (
	book_ride,
	can_transition,
	cancel_booking,
	cancel_ride,
	complete_ride,
	confirm_pickup,
	create_ride,
	delete_ride,
	generate_otp,
	list_available_rides,
	list_provider_rides,
	list_rider_bookings,
	search_rides,
	start_ride,
	update_live_location,
)


def make_provider(username='provider', with_profile=True, category='Car'):
	user = User.objects.create_user(
		username=username,
		password='Pass1234',
		role='provider',
		name='John Doe',
		mobile_number='9000000001',
	)
	if with_profile:
		suffix = str(user.id)
		ProviderProfile.objects.create(
			user=user,
			vehicle_category=category,
			vehicle_type='Sedan' if category == 'Car' else '',
			vehicle_number='WB-' + suffix,
			rc_number='RC-' + suffix,
			insurance_number='INS-' + suffix,
			license_number='DL-' + suffix,
			aadhar_number='AAD-' + suffix,
		)
	return user


def make_rider(username='rider'):
	return User.objects.create_user(
		username=username,
		password='Pass1234',
		role='rider',
		name='Rita Rider',
		mobile_number='9000000002',
	)


def ride_data(**overrides):
	start = timezone.now() + timedelta(days=1)
	data = {
		'start_point': 'Connaught Place',
		'destination': 'India Gate',
		'break_locations': ['Janpath'],
		'start_time': start.isoformat(),
		'end_time': (start + timedelta(hours=1)).isoformat(),
		'ride_cost': '150.00',
		'women_only': False,
	}
	data.update(overrides)
	return data


class CreateRideTests(TestCase):
	def setUp(self):
		self.provider = make_provider()

	def test_create_ride_copies_vehicle_category(self):
		result = create_ride(self.provider, ride_data())

		ride = result.ride
		self.assertEqual(ride.status, 'created')
		self.assertEqual(ride.vehicle_category, 'Car')
		self.assertEqual(ride.ride_cost, Decimal('150.00'))
		self.assertEqual(ride.break_locations, ['Janpath'])
		self.assertIsNone(ride.live_location)
		self.assertFalse(ride.bookings.exists())

	def test_explicit_vehicle_category_wins(self):
		ride = create_ride(self.provider, ride_data(vehicle_category='Bike')).ride
		self.assertEqual(ride.vehicle_category, 'Bike')

	def test_rider_cannot_create_ride(self):
		with self.assertRaises(ForbiddenError):
			create_ride(make_rider(), ride_data())
		self.assertFalse(Ride.objects.exists())

	def test_provider_without_profile(self):
		bare = make_provider('bare', with_profile=False)
		with self.assertRaises(ProfileIncompleteError):
			create_ride(bare, ride_data())

	def test_invalid_ride_fields(self):
		for bad in (
			ride_data(ride_cost='0'),
			ride_data(ride_cost='-5'),
			ride_data(start_point=''),
			ride_data(vehicle_category='Truck'),
		):
			with self.assertRaises(InvalidInputError):
				create_ride(self.provider, bad)

		start = timezone.now() + timedelta(days=1)
		with self.assertRaises(InvalidInputError):
			create_ride(self.provider, ride_data(
				start_time=start.isoformat(),
				end_time=(start - timedelta(minutes=5)).isoformat(),
			))
		self.assertFalse(Ride.objects.exists())

	def test_ride_cost_is_rounded_to_cents(self):
		ride = create_ride(self.provider, ride_data(ride_cost=12.345)).ride
		ride.refresh_from_db()
		self.assertEqual(ride.ride_cost, Decimal('12.35'))

		ride = create_ride(self.provider, ride_data(ride_cost='99.994')).ride
		self.assertEqual(ride.ride_cost, Decimal('99.99'))

	def test_cost_rounding_to_zero_is_rejected(self):
		with self.assertRaises(InvalidInputError):
			create_ride(self.provider, ride_data(ride_cost='0.004'))

	def test_missing_destination(self):
		data = ride_data()
		del data['destination']
		with self.assertRaises(InvalidInputError):
			create_ride(self.provider, data)


class ListingTests(TestCase):
	def setUp(self):
		self.provider = make_provider()
		self.other_provider = make_provider('other')
		self.future = create_ride(self.provider, ride_data()).ride
		self.past = Ride.objects.create(
			provider=self.provider,
			vehicle_category='Car',
			start_point='Airport',
			destination='India Gate',
			start_time=timezone.now() - timedelta(hours=2),
			ride_cost=Decimal('200.00'),
		)
		self.foreign = create_ride(self.other_provider, ride_data(start_point='Noida')).ride

	def test_provider_sees_only_own_rides(self):
		rides = list(list_provider_rides(self.provider))
		self.assertEqual({r.id for r in rides}, {self.future.id, self.past.id})

	def test_available_rides_hide_past_and_non_created(self):
		start_ride(self.foreign.id, self.other_provider)

		ids = set(list_available_rides().values_list('id', flat=True))
		self.assertEqual(ids, {self.future.id})

	def test_available_rides_relative_to_given_time(self):
		earlier = timezone.now() - timedelta(days=1)
		ids = set(list_available_rides(now=earlier).values_list('id', flat=True))
		self.assertEqual(ids, {self.future.id, self.past.id, self.foreign.id})

	def test_search_is_case_insensitive_substring(self):
		ids = set(search_rides(start_point='connaught').values_list('id', flat=True))
		self.assertEqual(ids, {self.future.id})

		ids = set(search_rides(destination='GATE').values_list('id', flat=True))
		self.assertEqual(ids, {self.future.id, self.past.id, self.foreign.id})

	def test_search_without_filters_returns_all_created(self):
		cancel_ride(self.foreign.id, self.other_provider)
		ids = set(search_rides().values_list('id', flat=True))
		self.assertEqual(ids, {self.future.id, self.past.id})


class BookingTests(TestCase):
	def setUp(self):
		self.provider = make_provider()
		self.rider = make_rider()
		self.ride = create_ride(self.provider, ride_data()).ride

	def test_book_ride_creates_accepted_booking_with_otp(self):
		result = book_ride(self.ride.id, self.rider)

		booking = result.booking
		self.assertEqual(booking.status, 'accepted')
		self.assertEqual(len(booking.otp), 4)
		self.assertTrue(booking.otp.isdigit())
		self.assertEqual(result.ride.id, self.ride.id)

	def test_double_booking_rejected_and_first_kept(self):
		first = book_ride(self.ride.id, self.rider).booking

		with self.assertRaises(AlreadyBookedError):
			book_ride(self.ride.id, self.rider)

		bookings = Booking.objects.filter(ride=self.ride, rider=self.rider)
		self.assertEqual(bookings.count(), 1)
		self.assertEqual(bookings.get().otp, first.otp)

	def test_book_missing_ride(self):
		with self.assertRaises(NotFoundError):
			book_ride(999999, self.rider)

	def test_rebook_after_cancelling(self):
		book_ride(self.ride.id, self.rider)
		cancel_booking(self.ride.id, self.rider)

		again = book_ride(self.ride.id, self.rider).booking
		self.assertEqual(again.status, 'accepted')
		self.assertEqual(Booking.objects.filter(ride=self.ride, rider=self.rider).count(), 2)

	def test_cancel_booking_requires_active_booking(self):
		with self.assertRaises(NotFoundError):
			cancel_booking(self.ride.id, self.rider)

	def test_cancel_booking_after_start_is_rejected(self):
		book_ride(self.ride.id, self.rider)
		start_ride(self.ride.id, self.provider)

		with self.assertRaises(InvalidStateError):
			cancel_booking(self.ride.id, self.rider)

	def test_list_rider_bookings(self):
		book_ride(self.ride.id, self.rider)
		bookings = list(list_rider_bookings(self.rider))
		self.assertEqual(len(bookings), 1)
		self.assertEqual(bookings[0].ride.provider, self.provider)

	@patch('services.ride_management.ride_lifecycle.notify_user_event')
	def test_booking_notifies_provider(self, mock_notify):
		with self.captureOnCommitCallbacks(execute=True):
			book_ride(self.ride.id, self.rider)

		mock_notify.assert_called_once()
		self.assertEqual(mock_notify.call_args.args[0], self.provider.id)
		self.assertEqual(mock_notify.call_args.args[1], 'ride_booked')

	def test_unrelated_integrity_error_is_not_a_double_booking(self):
		error = IntegrityError('FOREIGN KEY constraint failed')
		with patch.object(Booking.objects, 'create', side_effect=error):
			with self.assertRaises(IntegrityError):
				book_ride(self.ride.id, self.rider)

	def test_named_constraint_violation_is_a_double_booking(self):
		error = IntegrityError(
			'duplicate key value violates unique constraint "unique_active_booking"'
		)
		with patch.object(Booking.objects, 'create', side_effect=error):
			with self.assertRaises(AlreadyBookedError):
				book_ride(self.ride.id, self.rider)

	@override_settings(RIDE_OTP_LENGTH=6)
	def test_otp_length_follows_settings(self):
		self.assertEqual(len(generate_otp()), 6)
		self.assertEqual(len(generate_otp(3)), 3)


class LifecycleTests(TestCase):
	def setUp(self):
		self.provider = make_provider()
		self.other_provider = make_provider('other')
		self.rider = make_rider()
		self.ride = create_ride(self.provider, ride_data()).ride
		self.booking = book_ride(self.ride.id, self.rider).booking

	def test_transition_table(self):
		self.assertTrue(can_transition('created', 'started'))
		self.assertTrue(can_transition('started', 'canceled'))
		self.assertFalse(can_transition('completed', 'canceled'))
		self.assertFalse(can_transition('created', 'completed'))

	def test_full_ride_flow(self):
		start_ride(self.ride.id, self.provider)
		confirm_pickup(self.ride.id, self.provider, self.rider.id, self.booking.otp)

		self.booking.refresh_from_db()
		self.assertEqual(self.booking.status, 'in-ride')

		result = complete_ride(self.ride.id, self.provider)
		self.booking.refresh_from_db()
		self.assertEqual(result.ride.status, 'completed')
		self.assertIsNotNone(result.ride.completed_at)
		self.assertEqual(self.booking.status, 'completed')
		self.assertEqual(result.extra['completed_bookings'], 1)

	def test_complete_cancels_riders_never_picked_up(self):
		start_ride(self.ride.id, self.provider)
		result = complete_ride(self.ride.id, self.provider)

		self.booking.refresh_from_db()
		self.assertEqual(self.booking.status, 'canceled')
		self.assertEqual(result.extra['canceled_bookings'], 1)

	def test_complete_requires_started(self):
		with self.assertRaises(InvalidStateError):
			complete_ride(self.ride.id, self.provider)

	def test_wrong_otp(self):
		start_ride(self.ride.id, self.provider)
		wrong = '0000' if self.booking.otp != '0000' else '1111'

		with self.assertRaises(InvalidInputError):
			confirm_pickup(self.ride.id, self.provider, self.rider.id, wrong)

		self.booking.refresh_from_db()
		self.assertEqual(self.booking.status, 'accepted')

	def test_pickup_before_start(self):
		with self.assertRaises(InvalidStateError):
			confirm_pickup(self.ride.id, self.provider, self.rider.id, self.booking.otp)

	def test_cancel_ride_cancels_bookings(self):
		result = cancel_ride(self.ride.id, self.provider, reason='Car broke down')

		self.booking.refresh_from_db()
		self.assertEqual(result.ride.status, 'canceled')
		self.assertEqual(result.ride.cancellation_reason, 'Car broke down')
		self.assertEqual(self.booking.status, 'canceled')

		with self.assertRaises(InvalidStateError):
			start_ride(self.ride.id, self.provider)

	def test_only_owner_can_act(self):
		for action in (start_ride, complete_ride, cancel_ride, delete_ride):
			with self.assertRaises(ForbiddenError):
				action(self.ride.id, self.other_provider)

	def test_live_location_only_while_started(self):
		with self.assertRaises(InvalidStateError):
			update_live_location(self.ride.id, self.provider, 28.6139, 77.209)

		start_ride(self.ride.id, self.provider)
		ride = update_live_location(self.ride.id, self.provider, 28.6139, 77.209).ride

		self.assertEqual(ride.live_location, {'latitude': 28.6139, 'longitude': 77.209})
		self.assertIsNotNone(ride.live_location_updated_at)


class DeleteRideTests(TestCase):
	def setUp(self):
		self.provider = make_provider()
		self.ride = create_ride(self.provider, ride_data()).ride

	def test_delete_created_ride(self):
		book_ride(self.ride.id, make_rider())
		result = delete_ride(self.ride.id, self.provider)

		self.assertEqual(result.extra['ride_id'], self.ride.id)
		self.assertFalse(Ride.objects.filter(id=self.ride.id).exists())
		self.assertFalse(Booking.objects.exists())

	def test_delete_started_ride_is_rejected(self):
		start_ride(self.ride.id, self.provider)

		with self.assertRaises(InvalidStateError):
			delete_ride(self.ride.id, self.provider)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.status, 'started')

	def test_delete_completed_ride_is_rejected(self):
		start_ride(self.ride.id, self.provider)
		complete_ride(self.ride.id, self.provider)

		with self.assertRaises(InvalidStateError):
			delete_ride(self.ride.id, self.provider)
		self.assertTrue(Ride.objects.filter(id=self.ride.id).exists())

	def test_delete_missing_ride(self):
		with self.assertRaises(NotFoundError):
			delete_ride(999999, self.provider)

	@patch('services.ride_management.ride_lifecycle.notify_ride_event')
	def test_ride_events_wait_for_commit(self, mock_notify):
		with self.captureOnCommitCallbacks() as callbacks:
			start_ride(self.ride.id, self.provider)

		mock_notify.assert_not_called()
		self.assertEqual(len(callbacks), 1)

		callbacks[0]()
		mock_notify.assert_called_once()
		self.assertEqual(mock_notify.call_args.args[1], 'ride_started')

	@patch('services.ride_management.ride_lifecycle.notify_ride_event')
	def test_rolled_back_cancel_sends_nothing(self, mock_notify):
		with self.captureOnCommitCallbacks(execute=True) as callbacks:
			with self.assertRaises(RuntimeError):
				with transaction.atomic():
					cancel_ride(self.ride.id, self.provider)
					raise RuntimeError('rolled back')

		self.assertEqual(callbacks, [])
		mock_notify.assert_not_called()
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.status, 'created')
