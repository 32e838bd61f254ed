from django.urls import path
from . import views

app_name = 'rides'

urlpatterns = [
    path('', views.rides, name='rides'),
    path('search/', views.search_rides, name='search-rides'),

    # Rider booking actions
    path('<int:ride_id>/book/', views.book_ride, name='book-ride'),
    path('<int:ride_id>/cancel-booking/', views.cancel_booking, name='cancel-booking'),
]
