"""Exceptions raised while fetching and parsing package indexes."""


class FetchPackagesError(Exception):
    """Base class for every failure of a fetch-and-parse call."""


class TransportError(FetchPackagesError):
    """The index could not be downloaded (connection, timeout or HTTP status)."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def __reduce__(self):
        return (self.__class__, (str(self), self.url, self.status_code))


class IoError(FetchPackagesError):
    """A local filesystem operation failed."""


class DecompressionError(IoError):
    """The downloaded data is not a valid xz stream."""


class ParseControlError(FetchPackagesError):
    """The index document could not be parsed."""


class EncodingError(ParseControlError):
    """The index document is not valid UTF-8."""


class ControlFormatError(ParseControlError):
    """The index document violates the control file syntax."""

    def __init__(self, message: str, lineno: int | None = None):
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
        self.lineno = lineno

    def __reduce__(self):
        # args[0] already carries the line prefix
        return (_restore_control_format_error, (str(self), self.lineno))


class WorkerFailure(FetchPackagesError):
    """The offloaded parse job terminated abnormally."""


def _restore_control_format_error(message: str, lineno: int | None) -> ControlFormatError:
    err = ControlFormatError(message)
    err.lineno = lineno
    return err
