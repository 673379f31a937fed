"""Error types."""


class IriError(Exception):
    """An error encountered while building a URI."""

    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


class InvalidURI(IriError):
    """Error indicating that a source string is not syntactically valid as a URI."""


class InvalidArgument(IriError):
    """
    Error indicating that an operation received `None` where a value is required,
    or a value of the wrong shape (e.g. a string where a mapping of query parameters is expected).
    """
