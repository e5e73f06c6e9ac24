class MalformedRowError(ValueError):
    """Input table is missing a required column, or a row is missing a required field."""


class UnknownTimeZoneError(ValueError):
    """A row names a time zone that is not in the IANA database."""

    def __init__(self, tz):
        super().__init__(f"Unknown time zone: {tz!r}")
        self.tz = tz
