"""Admission rejections raised by the validating webhook."""

import kopf


class RejectionError(kopf.AdmissionError):
    """A request the webhook refuses; the message is shown to the caller."""

    code = 422

    def __init__(self, message: str):
        super().__init__(message, code=self.code)
        self.reason = message


class InvalidSpec(RejectionError):
    """The submitted specification breaks a structural rule."""


class ImmutableFieldViolation(RejectionError):
    """An update tried to change a field that is fixed after creation."""
