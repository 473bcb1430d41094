from .resources import RepositoryResource, PullRequestsResource
from .clients import RepositoriesGatewayABC, BitbucketGateway
from .models import (
    Account,
    Repository,
    BranchRestriction,
    Commit,
    Comment,
    Participant,
    PullRequest,
    DiffOptions,
    PatchOptions,
)
from .exceptions import Error, ClientError, NotFoundError, AuthenticationError
