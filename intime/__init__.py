from .errors import InTimeError, ParseError, ResolutionError
from .instant import Resolution
from .interval import DurationInterval
from .util import DAY, DEFAULT_TZ, HOUR, MINUTE, SECOND, WEEK, YEAR

__all__ = [
    "DurationInterval",
    "Resolution",
    "InTimeError",
    "ParseError",
    "ResolutionError",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "YEAR",
    "DEFAULT_TZ",
]
