import logging

import pytz

from ...core.exceptions import InvalidParameterError
from ...core.interval import TimeInterval

#-----------------------------------------------------------------------------

class QueryConfig:
    def __init__(
        self,
        timezone        : str = "",
        default_interval: str = ""
    ):
        name = timezone.strip() if timezone else ""
        try:
            self.timezone = pytz.timezone(name) if name else pytz.utc
        except pytz.exceptions.UnknownTimeZoneError:
            logging.warning(f"Unknown QUERY_TIMEZONE '{name}', falling back to UTC")
            self.timezone = pytz.utc

        interval = default_interval.strip().lower() if default_interval else "day"
        try:
            TimeInterval.parse(interval)
        except InvalidParameterError:
            logging.warning(f"Unknown QUERY_DEFAULT_INTERVAL '{interval}', falling back to 'day'")
            interval = "day"
        self.default_interval = interval

#-----------------------------------------------------------------------------
