"""Error types raised by indicator calculations."""


class IndicatorError(ValueError):
    """Base class for indicator input and configuration errors."""
    pass


class InsufficientDataError(IndicatorError):
    """Series is shorter than the history an indicator needs."""

    def __init__(self, indicator: str, required: int, available: int):
        self.indicator = indicator
        self.required = required
        self.available = available
        super().__init__(
            f"{indicator} needs at least {required} bars, got {available}"
        )


class InvalidConfigurationError(IndicatorError):
    """Non-positive period/multiplier or otherwise unusable parameters."""
    pass


class NonMonotonicTimestampsError(IndicatorError):
    """Bar timestamps are not strictly increasing."""

    def __init__(self, position: int, previous: int, current: int):
        self.position = position
        self.previous = previous
        self.current = current
        super().__init__(
            f"Timestamps must be strictly increasing: position {position} "
            f"has {current} after {previous}"
        )


class MissingColumnsError(IndicatorError):
    """Input DataFrame lacks required OHLC columns."""
    pass
