"""Custom exceptions for the kafka_producer_tui package."""


class KafkaProducerTuiError(Exception):
    """Base class for all errors raised by the application."""

    pass


class ConfigLoadError(KafkaProducerTuiError):
    """Raised when the persisted configuration file cannot be read or parsed."""

    pass


class PersistError(KafkaProducerTuiError):
    """Raised when the configuration cannot be written to disk."""

    pass


class ValidationError(KafkaProducerTuiError):
    """Raised for locally detected problems before any broker call is made."""

    pass


class SecurityError(KafkaProducerTuiError):
    """Raised when mutual-TLS material cannot be loaded."""

    pass


class ConnectError(KafkaProducerTuiError):
    """Raised when a broker session cannot be opened."""

    pass


class PublishError(KafkaProducerTuiError):
    """Raised when a message could not be delivered to the broker."""

    pass


class FormatError(KafkaProducerTuiError):
    """Raised when the message value is not well-formed JSON."""

    pass
