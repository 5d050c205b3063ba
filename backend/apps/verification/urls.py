"""
URL configuration for verification app.
"""
from django.urls import path
from apps.verification import views

app_name = 'verification'

urlpatterns = [
    path('send-sms-code/', views.send_sms_code, name='send_sms_code'),
    path('verify-sms-code/', views.verify_sms_code, name='verify_sms_code'),
    path('<int:buyer_id>/resend-sms-code/', views.resend_sms_code, name='resend_sms_code'),
]
