"""Market data errors raised by the Tradier client."""


class MarketDataError(Exception):
    """Base class for failures reported by the market data provider."""


class InvalidSymbolError(MarketDataError):
    """The provider returned no quote for the requested symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Invalid symbol or no data available: {symbol}")
        self.symbol = symbol


class ProviderTransientError(MarketDataError):
    """Network failure or server error that persisted through all retries."""
