"""Custom exceptions for clearer error handling across the package."""


class MarketDataError(Exception):
    """Base exception for all package-specific errors."""


class InputError(MarketDataError):
    """Raised when a bar series violates the input contract."""


class ParameterError(MarketDataError):
    """Raised when an indicator request carries invalid parameters."""


class DataProviderError(MarketDataError):
    """Raised when market data retrieval or normalization fails."""


class ConfigError(MarketDataError):
    """Raised when environment or CLI configuration is invalid."""
