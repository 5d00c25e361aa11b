from django.conf import settings
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken


class JWTAuthCookieMiddleware:
    """
    Get the provider's JWT from an httpOnly cookie and inject it into the
    Authorization header. Tokens are minted by the identity provider, so there
    is no refresh step here: an invalid or expired cookie is ignored and the
    request proceeds anonymously.
    IMPORTANT: Do NOT override an explicit Authorization header provided by the client.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.META.get("HTTP_AUTHORIZATION"):
            return self.get_response(request)

        cookie_name = getattr(settings, "AUTH_COOKIE_NAME", "access_token")
        access_token = request.COOKIES.get(cookie_name)
        if access_token:
            try:
                AccessToken(access_token)  # validates signature and expiry
            except TokenError:
                access_token = None
        if access_token:
            request.META["HTTP_AUTHORIZATION"] = f"Bearer {access_token}"

        return self.get_response(request)
