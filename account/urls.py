# urls.py
from django.urls import path
from account.views import UserRegistrationView, UserLoginView, UserProfileView, UserChangePasswordView
from rest_framework_simplejwt.views import TokenRefreshView

urlpatterns = [
    path('register', UserRegistrationView.as_view(), name='register'),
    path('login', UserLoginView.as_view(), name='login'),
    path('me', UserProfileView.as_view(), name='profile'),
    path('change-password', UserChangePasswordView.as_view(), name='change-password'),
    path('token/refresh', TokenRefreshView.as_view(), name='token_refresh'),
]
