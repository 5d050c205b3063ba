"""
URL configuration for waitlist app.
"""
from django.urls import path
from apps.waitlist import views

app_name = 'waitlist'

urlpatterns = [
    path('', views.waitlist, name='waitlist'),
]
