class Error(Exception):
    """General client exception."""


class ClientError(Error):
    """The service returned an error, or could not be reached.

    Arguments
    ---------
    message : str
        A human-readable description of the problem.
    status : int or None
        The HTTP status code of the response, or None if no response was
        received.

    """

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self):
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class NotFoundError(ClientError):
    """The requested resource does not exist."""


class AuthenticationError(ClientError):
    """The credentials were rejected or lack the needed permission."""
