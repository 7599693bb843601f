from django.conf import settings
from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object


class DoctorJWTScheme(OpenApiAuthenticationExtension):
    """
    Swagger "Authorize" takes the bearer token; browsers send the access
    cookie set by auth/login instead.
    """

    target_class = "mp_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        scheme = build_bearer_security_scheme_object(
            header_name="AUTHORIZATION",
            token_prefix="Bearer",
            bearer_format="JWT",
        )
        cookie = settings.SIMPLE_JWT.get("AUTH_COOKIE", "mp_access")
        scheme["description"] = f"Access token as `Authorization: Bearer <token>` or the `{cookie}` cookie."
        return scheme
