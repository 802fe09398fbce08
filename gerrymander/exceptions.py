"""
Errors raised by the redistricting core.
"""


class GerrymanderError(Exception):
    """Base class for every error raised by this package."""


class PrecinctNotFound(GerrymanderError, KeyError):
    """Lookup of a precinct id that was never registered."""

    def __init__(self, precinct_id):
        self.precinct_id = precinct_id
        super().__init__(f"No precinct for given id: {precinct_id!r}")

    def __str__(self):
        # KeyError would otherwise print the repr of the message
        return self.args[0]


class InvalidDistrictCount(GerrymanderError, ValueError):
    """Requested number of districts cannot partition the registry."""


class GenerationExhausted(GerrymanderError, RuntimeError):
    """A rejection-sampling loop ran out of attempts or time."""

    def __init__(self, message, attempts):
        self.attempts = attempts
        super().__init__(message)


class DegenerateInput(GerrymanderError, ZeroDivisionError):
    """The plan holds no votes at all, so the efficiency gap is undefined."""
