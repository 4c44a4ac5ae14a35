"""
Service error taxonomy.

Services raise these; main.py renders them as
{"error": <english>, "errorHindi": <hindi>} with the matching status code.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors that map to a client-facing response"""

    status_code = 500
    default_message = "Something went wrong. Please try again."
    default_message_hindi = "कुछ गलत हो गया। फिर से प्रयास करें।"
    # Extra response headers, e.g. Content-Range on 416
    headers: Optional[dict] = None

    def __init__(self, message: Optional[str] = None, message_hindi: Optional[str] = None):
        self.message = message or self.default_message
        self.message_hindi = message_hindi or self.default_message_hindi
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "errorHindi": self.message_hindi}


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request"
    default_message_hindi = "गलत जानकारी"


class DuplicateError(ServiceError):
    status_code = 400
    default_message = "Already exists"
    default_message_hindi = "पहले से मौजूद है"


class InvalidCredentials(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"
    default_message_hindi = "गलत लॉगिन जानकारी"


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = "Not authenticated"
    default_message_hindi = "लॉगिन नहीं है"


class AccountDisabled(ServiceError):
    status_code = 403
    default_message = "Account is disabled"
    default_message_hindi = "खाता बंद है"


class AccountNotApproved(ServiceError):
    status_code = 403
    default_message = "Account is not approved"
    default_message_hindi = "खाता अभी स्वीकृत नहीं है"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Not allowed"
    default_message_hindi = "अनुमति नहीं है"


class OtpNotFound(ServiceError):
    status_code = 400
    default_message = "No OTP found. Please request a new one."
    default_message_hindi = "कोई OTP नहीं मिला। नया OTP भेजें।"


class OtpExpired(ServiceError):
    status_code = 400
    default_message = "OTP expired. Please request a new one."
    default_message_hindi = "OTP समाप्त हो गया। नया OTP भेजें।"


class OtpMismatch(ServiceError):
    status_code = 400
    default_message = "Invalid OTP"
    default_message_hindi = "गलत OTP"


class OtpNotVerified(ServiceError):
    status_code = 400
    default_message = "Please verify OTP first"
    default_message_hindi = "पहले OTP सत्यापित करें"


class AccountNotFound(ServiceError):
    status_code = 404
    default_message = "No account found with this number. Please register first."
    default_message_hindi = "इस नंबर से कोई खाता नहीं मिला। पहले रजिस्टर करें।"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"
    default_message_hindi = "नहीं मिला"


class Gone(ServiceError):
    status_code = 410
    default_message = "This link has expired"
    default_message_hindi = "यह लिंक समाप्त हो गया है"


class RangeNotSatisfiable(ServiceError):
    status_code = 416
    default_message = "Requested range not satisfiable"
    default_message_hindi = "अनुरोधित भाग उपलब्ध नहीं है"

    def __init__(self, file_size: int):
        super().__init__()
        self.headers = {"Content-Range": f"bytes */{file_size}"}


class RateLimited(ServiceError):
    status_code = 429
    default_message = "Too many requests. Please try again later."
    default_message_hindi = "बहुत अधिक अनुरोध। कृपया बाद में प्रयास करें।"

    def __init__(self, retry_after: int):
        super().__init__()
        self.headers = {"Retry-After": str(retry_after)}


class UpstreamError(ServiceError):
    status_code = 502
    default_message = "External service unavailable. Please try again."
    default_message_hindi = "बाहरी सेवा उपलब्ध नहीं है। फिर से प्रयास करें।"


class InternalError(ServiceError):
    status_code = 500
