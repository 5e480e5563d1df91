"""Exceptions raised by hemoglobin."""


class DecodeError(ValueError):
    """A textual rule code could not be decoded into a rule table."""
