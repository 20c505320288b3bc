"""Authentication API views with HttpOnly JWT cookies."""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from api.v1.serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger("api")


class SafeScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle that falls back to a strict default if scope config is missing."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' not configured, applying strict default 5/min.", self.scope)
            return "5/min"


def _cookie_max_age(delta: timedelta) -> int:
    return int(delta.total_seconds())


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        "path": getattr(settings, "JWT_AUTH_COOKIE_PATH", "/"),
        "domain": getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None),
    }


def _set_auth_cookies(response: Response, *, access: str, refresh: str | None) -> None:
    options = _cookie_options()
    response.set_cookie(
        key=getattr(settings, "JWT_AUTH_COOKIE", "access_token"),
        value=access,
        max_age=_cookie_max_age(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]),
        **options,
    )
    if refresh:
        response.set_cookie(
            key=getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token"),
            value=refresh,
            max_age=_cookie_max_age(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]),
            **options,
        )


def _clear_auth_cookies(response: Response) -> None:
    path = getattr(settings, "JWT_AUTH_COOKIE_PATH", "/")
    domain = getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None)
    response.delete_cookie(getattr(settings, "JWT_AUTH_COOKIE", "access_token"), path=path, domain=domain)
    response.delete_cookie(getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token"), path=path, domain=domain)


class CookieTokenObtainPairView(TokenObtainPairView):
    """Issue JWT and set HttpOnly auth cookies."""

    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated["refresh"]

        response_data = {"user": validated["user"]}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            response_data.update({"access": access, "refresh": refresh})

        response = Response(response_data, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class CookieTokenRefreshView(TokenRefreshView):
    """Refresh access token using body token or HttpOnly refresh cookie."""

    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_sustained"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        payload = request.data.copy()
        if not payload.get("refresh"):
            cookie_token = request.COOKIES.get(refresh_cookie)
            if cookie_token:
                payload["refresh"] = cookie_token

        serializer = self.get_serializer(data=payload)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated.get("refresh", payload.get("refresh"))
        response_data = {"detail": "Token refreshed."}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            response_data.update({"access": access, "refresh": refresh})

        response = Response(response_data, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class LogoutAPIView(APIView):
    """Clear auth cookies."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        response = Response(status=status.HTTP_204_NO_CONTENT)
        _clear_auth_cookies(response)
        return response
