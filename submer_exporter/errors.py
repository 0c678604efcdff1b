"""
Submer exporter exceptions.

Client code raises; the poll loop is the only place that swallows
SmartPodError (one failed tick).
"""


class SubmerExporterError(Exception):
    """Base exception for the exporter."""

    pass


class ConfigurationError(SubmerExporterError):
    """Configuration file or values are invalid."""

    pass


class SmartPodError(SubmerExporterError):
    """A single poll of the SmartPod API failed."""

    pass


class RequestBuildError(SmartPodError):
    """The configured API URL cannot be turned into a request."""

    pass


class TransportError(SmartPodError):
    """Connection failure or timeout talking to the SmartPod."""

    pass


class UpstreamStatusError(SmartPodError):
    """The SmartPod answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"{url} returned HTTP {status_code}")
        self.status_code = status_code
        self.url = url


class DecodeError(SmartPodError):
    """Response body is not JSON or does not have the realTime shape."""

    pass
