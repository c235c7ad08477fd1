"""Error taxonomy shared by the service, repository and API layers.

Every failure reaching the API carries a single human-readable message.
The subclasses only decide which HTTP status the message is sent with.
"""


class BenefitPointError(Exception):
    """Base error with a human-readable message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BenefitPointError):
    """A single-row fetch by id returned no row."""

    status_code = 404


class ValidationError(BenefitPointError):
    """A required field is empty or a payload is missing a required id."""

    status_code = 400


class DatabaseError(BenefitPointError):
    """The underlying store call failed."""

    status_code = 502
