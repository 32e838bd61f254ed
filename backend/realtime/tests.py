from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from django.test import SimpleTestCase

from .notifications import notify_ride_event, notify_user_event


class NotificationTests(SimpleTestCase):
	@patch('realtime.notifications.get_channel_layer')
	def test_ride_event_goes_to_ride_group(self, mock_get_layer):
		layer = MagicMock()
		layer.group_send = AsyncMock()
		mock_get_layer.return_value = layer

		ride = SimpleNamespace(id=7, status='started')
		self.assertTrue(notify_ride_event(ride, 'ride_started', 'Your ride has started.'))

		group, payload = layer.group_send.call_args.args
		self.assertEqual(group, 'ride_7')
		self.assertEqual(payload['type'], 'ride_event')
		self.assertEqual(payload['event'], 'ride_started')
		self.assertEqual(payload['status'], 'started')
		self.assertEqual(payload['message'], 'Your ride has started.')

	@patch('realtime.notifications.get_channel_layer')
	def test_user_event_goes_to_user_group(self, mock_get_layer):
		layer = MagicMock()
		layer.group_send = AsyncMock()
		mock_get_layer.return_value = layer

		self.assertTrue(notify_user_event(3, 'ride_booked', 7, extra={'booking_id': 11}))

		group, payload = layer.group_send.call_args.args
		self.assertEqual(group, 'user_3')
		self.assertEqual(payload['booking_id'], 11)
		self.assertNotIn('message', payload)

	@patch('realtime.notifications.get_channel_layer')
	def test_send_failure_is_swallowed(self, mock_get_layer):
		layer = MagicMock()
		layer.group_send = AsyncMock(side_effect=ConnectionError('redis down'))
		mock_get_layer.return_value = layer

		ride = SimpleNamespace(id=7, status='canceled')
		with self.assertLogs('realtime.notifications', level='ERROR'):
			self.assertFalse(notify_ride_event(ride, 'ride_cancelled'))

	@patch('realtime.notifications.get_channel_layer', return_value=None)
	def test_no_channel_layer(self, _):
		self.assertFalse(notify_user_event(3, 'ride_booked', 7))
		self.assertFalse(notify_user_event(None, 'ride_booked', 7))
