"""Gateway to the Bitbucket Cloud 2.0 REST API.

This gateway uses the Bitbucket API to perform the repository-level
operations declared by RepositoriesGatewayABC. It authenticates with basic
auth, using a username and an app password.

"""

import logging
import urllib.parse

import requests

from .abc import RepositoriesGatewayABC
from .. import models, settings
from ..exceptions import AuthenticationError, ClientError, NotFoundError


logger = logging.getLogger(__name__)


def _make_error_message(response):
    """Given an error response from the API, format a nice error message."""
    try:
        error = response.json()["error"]
    except (ValueError, KeyError, TypeError):
        return response.text.strip() or response.reason or "Unknown error."

    message = error.get("message", "Unknown error.")
    if error.get("detail"):
        message += " " + str(error["detail"])
    return message


def _raise_for_status(response):
    """Raise the ClientError matching an unsuccessful response."""
    if response.ok:
        return

    message = _make_error_message(response)
    if response.status_code == 404:
        raise NotFoundError(message, response.status_code)
    elif response.status_code in (401, 403):
        raise AuthenticationError(message, response.status_code)
    else:
        raise ClientError(message, response.status_code)


class BitbucketGateway(RepositoriesGatewayABC):
    """Gateway to a Bitbucket Cloud account.

    Arguments
    ---------
    user : str
        The username used for authentication.
    token : str
        An app password belonging to `user`.
    url : str
        The root of the REST API. Defaults to `settings.API_URL`.

    """

    def __init__(self, user, token, url=None):
        self.user = user
        self.token = token
        self.url = (url or settings.API_URL).rstrip("/")

        self.session = requests.Session()
        self.session.auth = (user, token)

    def _repository_url(self, account, repository, *parts):
        # revisions and diff specs may be branch names containing "/" or "#"
        segments = ["repositories", account, repository, *parts]
        return self.url + "".join(
            "/" + urllib.parse.quote(str(s), safe="") for s in segments
        )

    def _request(self, method, url, **kwargs):
        """Send a request, returning the response if it was successful.

        Raises
        ------
        ClientError
            If the service could not be reached or returned an error.

        """
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method, url, timeout=settings.timeout(), **kwargs
            )
        except requests.RequestException as exc:
            raise ClientError(f"Could not reach {url}: {exc}") from exc

        if not response.ok:
            logger.warning("%s %s failed with %s", method, url, response.status_code)
        _raise_for_status(response)
        return response

    def _json(self, method, url, **kwargs):
        """Send a request and decode the JSON body; None if there is no body."""
        response = self._request(method, url, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _text(self, url, **kwargs):
        return self._request("GET", url, **kwargs).text

    def _paginate(self, url, params=None):
        """Collect the values of every page of a collection endpoint.

        Collection endpoints answer with a page holding a list of "values"
        and, when more remain, the URL of the "next" page. The next URL
        already carries the query string, so params are only sent with the
        first request.

        """
        params = dict(params or {})
        params.setdefault("pagelen", settings.PAGE_LENGTH)

        values = []
        while url is not None:
            page = self._json("GET", url, params=params) or {}
            values.extend(page.get("values", []))
            url = page.get("next")
            params = None
            logger.debug("fetched %d values, next page: %s", len(values), url)
        return values

    # repository ------------------------------------------------------------

    def get_repository(self, account, repository):
        json = self._json("GET", self._repository_url(account, repository))
        return models.repository_from_json(json)

    def delete_repository(self, account, repository):
        json = self._json("DELETE", self._repository_url(account, repository))
        return models.repository_from_json(json) if json else None

    def list_watchers(self, account, repository):
        url = self._repository_url(account, repository, "watchers")
        return [models.account_from_json(a) for a in self._paginate(url)]

    def list_forks(self, account, repository):
        url = self._repository_url(account, repository, "forks")
        return [models.repository_from_json(r) for r in self._paginate(url)]

    # branch restrictions ---------------------------------------------------

    def list_branch_restrictions(self, account, repository):
        url = self._repository_url(account, repository, "branch-restrictions")
        return [models.branch_restriction_from_json(r) for r in self._paginate(url)]

    def post_branch_restriction(self, account, repository, restriction):
        url = self._repository_url(account, repository, "branch-restrictions")
        json = self._json(
            "POST", url, json=models.branch_restriction_to_json(restriction)
        )
        return models.branch_restriction_from_json(json)

    def get_branch_restriction(self, account, repository, restriction_id):
        url = self._repository_url(
            account, repository, "branch-restrictions", restriction_id
        )
        return models.branch_restriction_from_json(self._json("GET", url))

    def put_branch_restriction(self, account, repository, restriction):
        if restriction.id is None:
            raise ValueError("Cannot update a branch restriction without an id.")

        url = self._repository_url(
            account, repository, "branch-restrictions", restriction.id
        )
        json = self._json(
            "PUT", url, json=models.branch_restriction_to_json(restriction)
        )
        return models.branch_restriction_from_json(json)

    def delete_branch_restriction(self, account, repository, restriction_id):
        url = self._repository_url(
            account, repository, "branch-restrictions", restriction_id
        )
        self._json("DELETE", url)

    # diffs -----------------------------------------------------------------

    def get_diff(self, account, repository, options):
        url = self._repository_url(account, repository, "diff", options.spec)
        return self._text(url, params=models.diff_options_to_params(options))

    def get_patch(self, account, repository, options):
        url = self._repository_url(account, repository, "patch", options.spec)
        return self._text(url)

    # commits ---------------------------------------------------------------

    def list_commits(self, account, repository):
        # the service orders commits newest first
        url = self._repository_url(account, repository, "commits")
        return [models.commit_from_json(c) for c in self._paginate(url)]

    def get_commit(self, account, repository, revision):
        url = self._repository_url(account, repository, "commit", revision)
        return models.commit_from_json(self._json("GET", url))

    def list_commit_comments(self, account, repository, revision):
        url = self._repository_url(account, repository, "commit", revision, "comments")
        return [models.comment_from_json(c) for c in self._paginate(url)]

    def get_commit_comment(self, account, repository, revision, comment_id):
        url = self._repository_url(
            account, repository, "commit", revision, "comments", comment_id
        )
        return models.comment_from_json(self._json("GET", url))

    def approve_commit(self, account, repository, revision):
        url = self._repository_url(account, repository, "commit", revision, "approve")
        return models.participant_from_json(self._json("POST", url))

    def delete_commit_approval(self, account, repository, revision):
        url = self._repository_url(account, repository, "commit", revision, "approve")
        self._json("DELETE", url)

    # pull requests ---------------------------------------------------------

    def list_pull_requests(self, account, repository, state=None):
        url = self._repository_url(account, repository, "pullrequests")
        params = {"state": state} if state is not None else None
        return [models.pull_request_from_json(p) for p in self._paginate(url, params)]

    def post_pull_request(self, account, repository, pull_request):
        url = self._repository_url(account, repository, "pullrequests")
        json = self._json("POST", url, json=models.pull_request_to_json(pull_request))
        return models.pull_request_from_json(json)

    def get_pull_request(self, account, repository, pull_request_id):
        url = self._repository_url(account, repository, "pullrequests", pull_request_id)
        return models.pull_request_from_json(self._json("GET", url))

    def put_pull_request(self, account, repository, pull_request):
        if pull_request.id is None:
            raise ValueError("Cannot update a pull request without an id.")

        url = self._repository_url(account, repository, "pullrequests", pull_request.id)
        json = self._json("PUT", url, json=models.pull_request_to_json(pull_request))
        return models.pull_request_from_json(json)

    def list_pull_request_commits(self, account, repository, pull_request_id):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "commits"
        )
        return [models.commit_from_json(c) for c in self._paginate(url)]

    def list_pull_request_comments(self, account, repository, pull_request_id):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "comments"
        )
        return [models.comment_from_json(c) for c in self._paginate(url)]

    def approve_pull_request(self, account, repository, pull_request_id):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "approve"
        )
        return models.participant_from_json(self._json("POST", url))

    def delete_pull_request_approval(self, account, repository, pull_request_id):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "approve"
        )
        self._json("DELETE", url)

    def get_pull_request_diff(self, account, repository, pull_request_id):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "diff"
        )
        return self._text(url)

    def merge_pull_request(self, account, repository, pull_request_id, message=None):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "merge"
        )
        body = {"message": message} if message is not None else {}
        return models.pull_request_from_json(self._json("POST", url, json=body))

    def decline_pull_request(self, account, repository, pull_request_id):
        url = self._repository_url(
            account, repository, "pullrequests", pull_request_id, "decline"
        )
        return models.pull_request_from_json(self._json("POST", url))
