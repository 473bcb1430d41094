import io
import textwrap

import bucketeer.dotfile
import bucketeer.clients
import bucketeer.exceptions

import pytest


EXAMPLE = textwrap.dedent(
    """
    remotes:
        work:
            type: bitbucket
            user: bucketeer-test-user
            token: abcdef
        staging:
            type: bitbucket
            user: bucketeer-test-user
            token: ghijkl
            url: https://bitbucket.example.org/api/2.0/
    """
)


def test_load_returns_gateways():
    # given
    fileobj = io.StringIO(EXAMPLE)

    # when
    gateways = bucketeer.dotfile.load(fileobj)

    # then
    assert isinstance(gateways["work"], bucketeer.clients.BitbucketGateway)
    assert gateways["work"].user == "bucketeer-test-user"
    assert gateways["work"].token == "abcdef"

    assert gateways["staging"].url == "https://bitbucket.example.org/api/2.0"


def test_load_raises_if_missing_attribute():
    # given - missing "token" in work
    bad_example = textwrap.dedent(
        """
        remotes:
            work:
                type: bitbucket
                user: bucketeer-test-user
        """
    )

    # when then
    with pytest.raises(bucketeer.exceptions.Error):
        bucketeer.dotfile.load(io.StringIO(bad_example))


def test_load_raises_on_unknown_type():
    bad_example = textwrap.dedent(
        """
        remotes:
            work:
                type: gitlab
                user: bucketeer-test-user
                token: abcdef
        """
    )

    with pytest.raises(bucketeer.exceptions.Error) as excinfo:
        bucketeer.dotfile.load(io.StringIO(bad_example))

    assert "Unknown gateway type gitlab" in str(excinfo.value)


def test_load_raises_if_missing_remotes():
    with pytest.raises(bucketeer.exceptions.Error):
        bucketeer.dotfile.load(io.StringIO("stores: {}\n"))


def test_load_raises_on_invalid_yaml():
    with pytest.raises(bucketeer.exceptions.Error):
        bucketeer.dotfile.load(io.StringIO("remotes: [unclosed\n"))
