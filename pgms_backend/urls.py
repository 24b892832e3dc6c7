from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/auth/', include('account.urls')),
    path('api/v1/', include('hostel.urls')),
    path('api/v1/', include('payments.urls')),
]
