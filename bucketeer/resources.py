"""Repository-scoped views over a gateway.

The gateway exposes a flat API where every call names the account and the
repository it acts on. The resources in this module hold onto that pair so
callers don't have to repeat it:

    >>> repo = RepositoryResource("acme", "widget", gateway)
    >>> repo.get_commit("abc123")   # gateway.get_commit("acme", "widget", "abc123")

Resources do not validate, cache, retry or translate anything. Whatever the
gateway returns or raises is passed through unchanged.

"""


class RepositoryResource:
    """Information and operations associated with a single repository.

    Arguments
    ---------
    account : str
        The user or team owning the repository.
    repository : str
        The repository's slug.
    gateway : RepositoriesGatewayABC
        The gateway performing the calls. It is shared, not owned.

    """

    def __init__(self, account, repository, gateway):
        self._account = account
        self._repository = repository
        self._gateway = gateway

    @property
    def account(self):
        return self._account

    @property
    def repository(self):
        return self._repository

    @property
    def gateway(self):
        return self._gateway

    def __repr__(self):
        return f"RepositoryResource({self._account!r}, {self._repository!r})"

    def get_repository(self):
        """Return the repository's metadata."""
        return self._gateway.get_repository(self._account, self._repository)

    def delete_repository(self):
        """Remove the repository."""
        return self._gateway.delete_repository(self._account, self._repository)

    def list_watchers(self):
        """List the accounts watching the repository."""
        return self._gateway.list_watchers(self._account, self._repository)

    def list_forks(self):
        """List the repository's forks; each is a Repository."""
        return self._gateway.list_forks(self._account, self._repository)

    def pull_requests_resource(self):
        """Manage the pull requests of this repository.

        Returns
        -------
        PullRequestsResource
            Scoped to the same account, repository and gateway.

        """
        return PullRequestsResource(self._account, self._repository, self._gateway)

    # branch restrictions

    def list_branch_restrictions(self):
        """List the repository's branch restrictions."""
        return self._gateway.list_branch_restrictions(self._account, self._repository)

    def post_branch_restriction(self, restriction):
        """Create a branch restriction; its `id` is ignored."""
        return self._gateway.post_branch_restriction(
            self._account, self._repository, restriction
        )

    def get_branch_restriction(self, restriction_id):
        """Retrieve the branch restriction with the given integer id."""
        return self._gateway.get_branch_restriction(
            self._account, self._repository, restriction_id
        )

    def put_branch_restriction(self, restriction):
        """Update a restriction. Its `kind` cannot be changed this way."""
        return self._gateway.put_branch_restriction(
            self._account, self._repository, restriction
        )

    def delete_branch_restriction(self, restriction_id):
        """Delete the branch restriction with the given integer id."""
        return self._gateway.delete_branch_restriction(
            self._account, self._repository, restriction_id
        )

    # diffs

    def get_diff(self, options):
        """Retrieve the diff described by DiffOptions, as text."""
        return self._gateway.get_diff(self._account, self._repository, options)

    def get_patch(self, options):
        """Retrieve the patch described by PatchOptions, as text."""
        return self._gateway.get_patch(self._account, self._repository, options)

    # commits

    def list_commits(self):
        """List the commits across all branches, bookmarks and tags.

        The newest commit comes first.

        """
        return self._gateway.list_commits(self._account, self._repository)

    def get_commit(self, revision):
        """Retrieve the commit with the given SHA1."""
        return self._gateway.get_commit(self._account, self._repository, revision)

    def list_commit_comments(self, revision):
        """List the comments on a commit."""
        return self._gateway.list_commit_comments(
            self._account, self._repository, revision
        )

    def get_commit_comment(self, revision, comment_id):
        """Retrieve a single comment on a commit."""
        return self._gateway.get_commit_comment(
            self._account, self._repository, revision, comment_id
        )

    def approve_commit(self, revision):
        """Approve a commit on behalf of the authenticated account.

        Returns
        -------
        Participant
            The authenticated account's participation in the commit.

        """
        return self._gateway.approve_commit(self._account, self._repository, revision)

    def delete_commit_approval(self, revision):
        """Revoke the authenticated account's approval of a commit."""
        return self._gateway.delete_commit_approval(
            self._account, self._repository, revision
        )


class PullRequestsResource:
    """The pull requests of a single repository.

    Obtained from RepositoryResource.pull_requests_resource(); takes the same
    arguments.

    """

    def __init__(self, account, repository, gateway):
        self._account = account
        self._repository = repository
        self._gateway = gateway

    @property
    def account(self):
        return self._account

    @property
    def repository(self):
        return self._repository

    @property
    def gateway(self):
        return self._gateway

    def __repr__(self):
        return f"PullRequestsResource({self._account!r}, {self._repository!r})"

    def list_pull_requests(self, state=None):
        """List pull requests, optionally only those in the given state."""
        return self._gateway.list_pull_requests(
            self._account, self._repository, state
        )

    def post_pull_request(self, pull_request):
        """Open a new pull request."""
        return self._gateway.post_pull_request(
            self._account, self._repository, pull_request
        )

    def get_pull_request(self, pull_request_id):
        """Retrieve a single pull request."""
        return self._gateway.get_pull_request(
            self._account, self._repository, pull_request_id
        )

    def put_pull_request(self, pull_request):
        """Update the pull request identified by `pull_request.id`."""
        return self._gateway.put_pull_request(
            self._account, self._repository, pull_request
        )

    def list_pull_request_commits(self, pull_request_id):
        """List the commits on a pull request."""
        return self._gateway.list_pull_request_commits(
            self._account, self._repository, pull_request_id
        )

    def list_pull_request_comments(self, pull_request_id):
        """List the comments on a pull request."""
        return self._gateway.list_pull_request_comments(
            self._account, self._repository, pull_request_id
        )

    def approve_pull_request(self, pull_request_id):
        """Approve a pull request on behalf of the authenticated account."""
        return self._gateway.approve_pull_request(
            self._account, self._repository, pull_request_id
        )

    def delete_pull_request_approval(self, pull_request_id):
        """Revoke the authenticated account's approval of a pull request."""
        return self._gateway.delete_pull_request_approval(
            self._account, self._repository, pull_request_id
        )

    def get_pull_request_diff(self, pull_request_id):
        """Retrieve the diff of a pull request, as text."""
        return self._gateway.get_pull_request_diff(
            self._account, self._repository, pull_request_id
        )

    def merge_pull_request(self, pull_request_id, message=None):
        """Merge a pull request, optionally with a merge commit message."""
        return self._gateway.merge_pull_request(
            self._account, self._repository, pull_request_id, message
        )

    def decline_pull_request(self, pull_request_id):
        """Decline a pull request."""
        return self._gateway.decline_pull_request(
            self._account, self._repository, pull_request_id
        )
