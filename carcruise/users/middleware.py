import logging
from datetime import datetime, timezone

from django.conf import settings
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

logger = logging.getLogger(__name__)


class JWTAuthCookieMiddleware:
    """
    Read the JWT pair from httpOnly cookies and expose the access token as a
    Bearer Authorization header. An expired access token is re-issued from a
    valid refresh cookie. An explicit Authorization header always wins.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.META.get('HTTP_AUTHORIZATION'):
            return self.get_response(request)

        access = self._valid_access(request.COOKIES.get('access_token'))
        if access is not None:
            request.META['HTTP_AUTHORIZATION'] = f'Bearer {access}'
            return self.get_response(request)

        renewed = self._renew(request.COOKIES.get('refresh_token'))
        if renewed is None:
            return self.get_response(request)

        request.META['HTTP_AUTHORIZATION'] = f'Bearer {renewed}'
        response = self.get_response(request)
        response.set_cookie(
            key='access_token',
            value=str(renewed),
            httponly=True,
            secure=getattr(settings, 'AUTH_COOKIE_SECURE', not settings.DEBUG),
            samesite=getattr(settings, 'AUTH_COOKIE_SAMESITE', 'Lax'),
            expires=datetime.fromtimestamp(renewed['exp'], tz=timezone.utc),
            path=getattr(settings, 'AUTH_COOKIE_PATH', '/'),
            domain=getattr(settings, 'AUTH_COOKIE_DOMAIN', None),
        )
        return response

    @staticmethod
    def _valid_access(raw):
        if not raw:
            return None
        try:
            # AccessToken() verifies signature and expiry
            return AccessToken(raw)
        except TokenError:
            return None

    @staticmethod
    def _renew(raw):
        if not raw:
            return None
        try:
            return RefreshToken(raw).access_token
        except TokenError:
            logger.debug("Ignoring invalid refresh cookie")
            return None
