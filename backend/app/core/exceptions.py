"""Errors raised by the effort engine and mapped to API responses."""


class InvalidArgument(ValueError):
    """An engine input is outside the domain the formulas are defined on.

    Raised for a non-positive or non-finite max heart rate and for a
    negative or non-finite duration. Missing heart-rate samples are never
    an error; they are absorbed by the aggregate computation.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
