"""
URL configuration for the Group Ledger API.

Every API route lives under ``/v1/``; each app owns its own ``urls.py``.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check
    path('v1/health', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('v1/schema', SpectacularAPIView.as_view(), name='api-schema'),
    path('v1/docs', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('v1/', include('apps.accounts.urls')),
    path('v1/users/token/refresh', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('v1/', include('apps.groups.urls')),
    path('v1/', include('apps.expenses.urls')),
    path('v1/', include('apps.ledger.urls')),
    path('v1/', include('apps.chat.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
