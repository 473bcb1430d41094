from .abc import RepositoriesGatewayABC
from .bitbucket import BitbucketGateway
