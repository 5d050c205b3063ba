"""
URL configuration for buyers app.
"""
from django.urls import path
from apps.buyers import views

app_name = 'buyers'

urlpatterns = [
    # Sign-up
    path('signup/', views.signup, name='signup'),
    path('check-email/', views.check_email, name='check_email'),
    path('check-phone/', views.check_phone, name='check_phone'),

    # Documents
    path('upload-verification-image/', views.upload_verification_image, name='upload_verification_image'),

    # Reviewer endpoints
    path('admin/all/', views.list_buyers, name='list_buyers'),
    path('<int:buyer_id>/profile/', views.buyer_profile, name='profile'),
    path('<int:buyer_id>/approve/', views.approve_buyer, name='approve'),
    path('<int:buyer_id>/reject/', views.reject_buyer, name='reject'),
    path('<int:buyer_id>/verification-status/', views.update_verification_status, name='verification_status'),
]
