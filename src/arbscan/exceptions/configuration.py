from arbscan.exceptions.base import ArbscanError


class ConfigurationError(ArbscanError):
    """
    Raised when the related-pair mapping or the process settings are missing or malformed. This is
    fatal at startup and is never raised by a scan cycle.
    """
