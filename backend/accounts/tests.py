from django.contrib import admin
from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from providers.models import ProviderProfile
from riders.models import RiderProfile
from .models import User
from .views import LoginView, MeView, RegisterView, RoleView


def register_payload(**overrides):
	payload = {
		'username': 'john_doe',
		'email': 'john@example.com',
		'password': 'Password1',
		'name': 'John Doe',
		'gender': 'Male',
		'age': 30,
		'mobile_number': '9876543210',
	}
	payload.update(overrides)
	return payload


class AuthTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()

	def register(self, payload):
		request = self.factory.post('/api/auth/register/', payload, format='json')
		return RegisterView.as_view()(request)

	def test_register_defaults_to_rider(self):
		response = self.register(register_payload())

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['user']['role'], 'rider')
		self.assertIn('access', response.data['tokens'])

	def test_register_as_provider(self):
		response = self.register(register_payload(role='provider'))
		self.assertEqual(response.data['user']['role'], 'provider')

	def test_register_validation(self):
		for bad in (
			register_payload(password='password'),
			register_payload(age=16),
			register_payload(mobile_number='12345'),
		):
			response = self.register(bad)
			self.assertEqual(response.status_code, 400)
		self.assertFalse(User.objects.exists())

	def test_register_rejects_taken_email(self):
		self.register(register_payload())
		response = self.register(register_payload(username='other', mobile_number='9876500000'))

		self.assertEqual(response.status_code, 400)
		self.assertIn('email', response.data)

	def test_login(self):
		self.register(register_payload())

		request = self.factory.post('/api/auth/login/', {'username': 'john_doe', 'password': 'Password1'}, format='json')
		response = LoginView.as_view()(request)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['role'], 'rider')

		request = self.factory.post('/api/auth/login/', {'username': 'john_doe', 'password': 'wrong'}, format='json')
		response = LoginView.as_view()(request)
		self.assertEqual(response.status_code, 400)

	def test_switch_role_and_me(self):
		self.register(register_payload())
		user = User.objects.get(username='john_doe')

		request = self.factory.put('/api/auth/role/', {'role': 'provider'}, format='json')
		force_authenticate(request, user=user)
		response = RoleView.as_view()(request)
		self.assertEqual(response.status_code, 200)

		request = self.factory.get('/api/auth/me/')
		force_authenticate(request, user=User.objects.get(pk=user.pk))
		response = MeView.as_view()(request)
		self.assertEqual(response.data['role'], 'provider')

	def test_invalid_role(self):
		user = User.objects.create_user(username='x', password='Pass1234', name='X', mobile_number='9000000000')

		request = self.factory.put('/api/auth/role/', {'role': 'admin'}, format='json')
		force_authenticate(request, user=user)
		response = RoleView.as_view()(request)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'invalid_input')


class UserAdminTests(TestCase):
	def test_user_admin_shows_profiles_inline(self):
		user_admin = admin.site._registry[User]
		self.assertEqual(
			[inline.model for inline in user_admin.inlines],
			[ProviderProfile, RiderProfile],
		)
		self.assertIn('Marketplace', [name for name, _ in user_admin.fieldsets])
