"""Discovery error taxonomy.

Error codes:
  1001: InvalidCoordinate
  1002: InvalidCriteria
  1003: InvalidLimit
  1004: MissingOrigin
"""


class DiscoveryError(Exception):
    """Base discovery error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 422,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class InvalidCoordinate(DiscoveryError):
    def __init__(self, lat: float, lon: float) -> None:
        super().__init__(
            1001,
            f"Invalid coordinate: lat={lat}, lon={lon} "
            "(expected lat in [-90, 90], lon in [-180, 180])",
        )


class InvalidCriteria(DiscoveryError):
    def __init__(self, detail: str, code: int = 1002) -> None:
        super().__init__(code, f"Invalid criteria: {detail}")


class InvalidLimit(InvalidCriteria):
    def __init__(self, limit: int) -> None:
        super().__init__(f"limit must be positive, got {limit}", code=1003)


class MissingOrigin(DiscoveryError):
    def __init__(self, reason: str) -> None:
        super().__init__(1004, f"An origin is required for {reason}")
