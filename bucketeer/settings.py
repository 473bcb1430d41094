"""Universal settings."""

import os

from .exceptions import Error


# root of the Bitbucket Cloud REST API
API_URL = os.getenv("BUCKETEER_API_URL", "https://api.bitbucket.org/2.0")

# how long to wait (in seconds) for the service to respond. Parsed by
# `timeout()` when a request is made
TIMEOUT = os.getenv("BUCKETEER_TIMEOUT", "30")

# number of records requested per page from collection endpoints
PAGE_LENGTH = 100

# name of the file used to read a bucketeer configuration
DOTFILE = ".bucketeer.yaml"


def timeout():
    """The request timeout in seconds.

    Raises
    ------
    Error
        If BUCKETEER_TIMEOUT is not a positive number.

    """
    try:
        seconds = float(TIMEOUT)
    except (TypeError, ValueError):
        raise Error(f'Invalid BUCKETEER_TIMEOUT "{TIMEOUT}". Expected a number.')

    if seconds <= 0:
        raise Error(f'Invalid BUCKETEER_TIMEOUT "{TIMEOUT}". Must be positive.')
    return seconds
