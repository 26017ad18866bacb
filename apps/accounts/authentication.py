from rest_framework_simplejwt.authentication import JWTAuthentication


class RawHeaderJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that also accepts the token as the bare header value.

    Mobile clients send ``Authorization: <token>`` without a scheme; the
    usual ``Authorization: Bearer <token>`` form keeps working.
    """

    def get_raw_token(self, header):
        parts = header.split()

        if len(parts) == 1:
            return parts[0]

        return super().get_raw_token(header)
