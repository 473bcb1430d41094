"""The abstract base class defining the gateway interface.

A gateway talks to the remote service and performs every repository-level
operation: fetching metadata, managing branch restrictions, reading commits,
working with pull requests, etc. Every method takes the account name and the
repository name first, followed by whatever the operation needs.

"""


import abc


class RepositoriesGatewayABC(abc.ABC):
    @abc.abstractmethod
    def get_repository(self, account, repository):
        """Retrieve a single repository.

        Arguments
        ---------
        account : str
            The user or team owning the repository.
        repository : str
            The repository's slug.

        Returns
        -------
        Repository

        Raises
        ------
        ClientError
            If the service reports an error.

        """

    @abc.abstractmethod
    def delete_repository(self, account, repository):
        """Remove a repository.

        Returns
        -------
        Repository or None
            The repository as reported by the service after deletion, or None
            if the service does not send it back.

        """

    @abc.abstractmethod
    def list_watchers(self, account, repository):
        """List the accounts watching a repository.

        Returns
        -------
        List[Account]

        """

    @abc.abstractmethod
    def list_forks(self, account, repository):
        """List the forks of a repository.

        Returns
        -------
        List[Repository]

        """

    # branch restrictions -----------------------------------------------------

    @abc.abstractmethod
    def list_branch_restrictions(self, account, repository):
        """List the repository's branch restrictions.

        Returns
        -------
        List[BranchRestriction]

        """

    @abc.abstractmethod
    def post_branch_restriction(self, account, repository, restriction):
        """Create a branch restriction.

        Arguments
        ---------
        account : str
            The user or team owning the repository.
        repository : str
            The repository's slug.
        restriction : BranchRestriction
            The restriction to create. Its `id` is ignored.

        Returns
        -------
        BranchRestriction
            The restriction as created by the service.

        """

    @abc.abstractmethod
    def get_branch_restriction(self, account, repository, restriction_id):
        """Retrieve the branch restriction with the given integer id."""

    @abc.abstractmethod
    def put_branch_restriction(self, account, repository, restriction):
        """Update a branch restriction.

        The restriction is identified by its `id`. Its `kind` cannot be
        changed by an update.

        Returns
        -------
        BranchRestriction

        """

    @abc.abstractmethod
    def delete_branch_restriction(self, account, repository, restriction_id):
        """Delete the branch restriction with the given integer id."""

    # diffs -----------------------------------------------------------------

    @abc.abstractmethod
    def get_diff(self, account, repository, options):
        """Retrieve a diff.

        Arguments
        ---------
        account : str
            The user or team owning the repository.
        repository : str
            The repository's slug.
        options : DiffOptions
            The revision (or range) to diff, and how to render it.

        Returns
        -------
        str
            The diff in unified format.

        """

    @abc.abstractmethod
    def get_patch(self, account, repository, options):
        """Retrieve a patch, as text, described by PatchOptions."""

    # commits ---------------------------------------------------------------

    @abc.abstractmethod
    def list_commits(self, account, repository):
        """List the commits across all branches, newest first.

        Returns
        -------
        List[Commit]

        """

    @abc.abstractmethod
    def get_commit(self, account, repository, revision):
        """Retrieve the commit with the given SHA1."""

    @abc.abstractmethod
    def list_commit_comments(self, account, repository, revision):
        """List the comments on a commit.

        Returns
        -------
        List[Comment]

        """

    @abc.abstractmethod
    def get_commit_comment(self, account, repository, revision, comment_id):
        """Retrieve a single comment on a commit."""

    @abc.abstractmethod
    def approve_commit(self, account, repository, revision):
        """Approve a commit on behalf of the authenticated account.

        Returns
        -------
        Participant
            The authenticated account's participation in the commit.

        """

    @abc.abstractmethod
    def delete_commit_approval(self, account, repository, revision):
        """Revoke the authenticated account's approval of a commit."""

    # pull requests ---------------------------------------------------------

    @abc.abstractmethod
    def list_pull_requests(self, account, repository, state=None):
        """List the repository's pull requests.

        Arguments
        ---------
        account : str
            The user or team owning the repository.
        repository : str
            The repository's slug.
        state : str or None
            One of OPEN, MERGED, DECLINED or SUPERSEDED. If None, the
            service's default (open pull requests only) applies.

        Returns
        -------
        List[PullRequest]

        """

    @abc.abstractmethod
    def post_pull_request(self, account, repository, pull_request):
        """Open a new pull request and return it as created."""

    @abc.abstractmethod
    def get_pull_request(self, account, repository, pull_request_id):
        """Retrieve a single pull request."""

    @abc.abstractmethod
    def put_pull_request(self, account, repository, pull_request):
        """Update the pull request identified by `pull_request.id`."""

    @abc.abstractmethod
    def list_pull_request_commits(self, account, repository, pull_request_id):
        """List the commits on a pull request."""

    @abc.abstractmethod
    def list_pull_request_comments(self, account, repository, pull_request_id):
        """List the comments on a pull request."""

    @abc.abstractmethod
    def approve_pull_request(self, account, repository, pull_request_id):
        """Approve a pull request, returning the caller's Participant."""

    @abc.abstractmethod
    def delete_pull_request_approval(self, account, repository, pull_request_id):
        """Revoke the caller's approval of a pull request."""

    @abc.abstractmethod
    def get_pull_request_diff(self, account, repository, pull_request_id):
        """Retrieve the diff of a pull request as text."""

    @abc.abstractmethod
    def merge_pull_request(self, account, repository, pull_request_id, message=None):
        """Merge a pull request.

        Arguments
        ---------
        account : str
            The user or team owning the repository.
        repository : str
            The repository's slug.
        pull_request_id : int
            The pull request's identifier.
        message : str or None
            The commit message of the merge commit. If None, the service
            generates one.

        Returns
        -------
        PullRequest
            The pull request in its merged state.

        """

    @abc.abstractmethod
    def decline_pull_request(self, account, repository, pull_request_id):
        """Decline a pull request, returning it in its declined state."""
