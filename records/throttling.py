from rest_framework.throttling import AnonRateThrottle


class LoginRateThrottle(AnonRateThrottle):
    """Per-IP limit on login attempts (``DEFAULT_THROTTLE_RATES['login']``)."""
    scope = 'login'


class RegisterRateThrottle(AnonRateThrottle):
    scope = 'register'
