from django.urls import path

from .views import RegisterView, LoginView, RefreshTokenView, MeView, RoleView

urlpatterns = [
    path('register/', RegisterView.as_view(), name='register'),
    path('login/', LoginView.as_view(), name='login'),
    path('refresh/', RefreshTokenView.as_view(), name='token-refresh'),
    path('me/', MeView.as_view(), name='me'),
    path('role/', RoleView.as_view(), name='role'),
]
