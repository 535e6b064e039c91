"""
URL mappings for the clinic API.

Paths match the front-end ``fetchAPI`` calls, which prefix every
endpoint with ``/api`` and never append a trailing slash.
"""
from django.urls import path, include

from .views import health
from .views.auth import login_view, register_view, refresh_view, logout_view
from .views.patients import patients, patient_detail


urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/login', login_view, name='login'),
    path('api/register', register_view, name='register'),
    path('api/auth/refresh', refresh_view, name='token_refresh'),
    path('api/logout', logout_view, name='logout'),
    # Patients
    path('api/patients', patients, name='patients'),
    path('api/patients/<int:pk>', patient_detail, name='patient_detail'),
]
