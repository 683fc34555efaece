"""
Error kinds raised by the billing services.

Each kind carries the HTTP status the API endpoint answers with; the
message is meant to be shown to the caller as-is.
"""


class BillingError(Exception):
    status_code = 400
    default_message = 'Request could not be processed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BillingError):
    status_code = 400
    default_message = 'Invalid input.'


class ConflictError(BillingError):
    status_code = 409
    default_message = 'Record already exists.'


class NotFoundError(BillingError):
    status_code = 404
    default_message = 'Record not found.'


class AuthError(BillingError):
    status_code = 403
    default_message = 'Not allowed.'
