"""
Error types raised by the trade producer
"""


class ProducerError(Exception):
    """Base class for trade producer errors"""


class PublishError(ProducerError):
    """A batch write to the broker failed"""

    def __init__(self, message: str, failed: int = 0):
        super().__init__(message)
        self.failed = failed


class AdminError(ProducerError):
    """A topic administration request failed"""


class BrokerConnectionError(ProducerError, ConnectionError):
    """The broker control connection could not be established"""
