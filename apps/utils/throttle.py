from rest_framework.throttling import UserRateThrottle, AnonRateThrottle


class BurstRateThrottle(UserRateThrottle):
    """
    Short-window limit applied to every API call.
    Scope: 'burst'
    """
    scope = 'burst'


class SustainedRateThrottle(UserRateThrottle):
    """
    General API usage.
    """
    scope = 'sustained'


class AuthRateThrottle(AnonRateThrottle):
    """
    Brute-force guard for signup/login, keyed by client IP.
    """
    scope = 'auth'

