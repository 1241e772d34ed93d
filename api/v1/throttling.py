"""
API rate limiting for RepairShop.
"""

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class AnonBasicRateThrottle(AnonRateThrottle):
    scope = "anon_basic"


class UserBasicRateThrottle(UserRateThrottle):
    scope = "user_basic"


class TrackingRateThrottle(AnonRateThrottle):
    """
    Public receipt lookups are keyed by guessable codes, so they get a tight limit.
    """

    scope = "tracking"


class AuthenticationRateThrottle(AnonRateThrottle):
    scope = "authentication"
