"""Exceptions raised by intime.

All intime-specific exceptions inherit from InTimeError. The concrete
errors also subclass ValueError so callers that already guard duration
parsing with ``except ValueError`` keep working.
"""


class InTimeError(Exception):
    """Base exception for all intime errors."""


class ParseError(InTimeError, ValueError):
    """A duration expression or relative phrase could not be parsed.

    Examples:
        - ``"3D"`` (missing the leading ``P``)
        - ``"P1D1Y"`` (units out of order)
        - ``"the day after never"``
    """


class ResolutionError(InTimeError, ValueError):
    """A concrete instant could not be built.

    Examples:
        - Unknown timezone name
        - Malformed base date/time string passed to ``project_from``
    """


__all__ = ["InTimeError", "ParseError", "ResolutionError"]
