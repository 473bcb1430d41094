"""Records exchanged with the Bitbucket Cloud API.

Each record is an immutable namedtuple. Records are built from the JSON
documents returned by the service with the ``*_from_json`` functions, and
those which are sent back to the service are serialized with the
``*_to_json`` functions. Field names follow the Bitbucket 2.0 schema where
that is practical.

"""

import collections


Account = collections.namedtuple("Account", ["uuid", "username", "display_name"])

Repository = collections.namedtuple(
    "Repository",
    [
        "uuid",
        "full_name",
        "name",
        "description",
        "is_private",
        "scm",
        "language",
        "created_on",
        "updated_on",
        "owner",
        "parent",
    ],
)

BranchRestriction = collections.namedtuple(
    "BranchRestriction",
    ["kind", "pattern", "id", "value", "users", "groups"],
    defaults=(None, None, (), ()),
)

Commit = collections.namedtuple(
    "Commit", ["hash", "message", "date", "author", "parents"]
)

Comment = collections.namedtuple(
    "Comment", ["id", "content", "user", "created_on", "updated_on"]
)

Participant = collections.namedtuple(
    "Participant", ["user", "role", "approved", "participated_on"]
)

PullRequest = collections.namedtuple(
    "PullRequest",
    [
        "title",
        "source_branch",
        "destination_branch",
        "id",
        "description",
        "state",
        "author",
        "close_source_branch",
        "created_on",
        "updated_on",
    ],
    defaults=("", None, "", None, None, False, None, None),
)

# options selecting what a diff is computed over. `spec` is either a single
# revision or a range of the form "<rev1>..<rev2>"
DiffOptions = collections.namedtuple(
    "DiffOptions",
    ["spec", "context", "path", "ignore_whitespace"],
    defaults=(None, None, False),
)

PatchOptions = collections.namedtuple("PatchOptions", ["spec"])


def account_from_json(json):
    """Given some JSON representing a user or team, extract an Account.

    Returns None if `json` is None, which is how the service represents a
    missing user (for instance, a commit author without a Bitbucket account).

    """
    if json is None:
        return None
    return Account(
        uuid=json.get("uuid"),
        username=json.get("username", json.get("nickname")),
        display_name=json.get("display_name"),
    )


def repository_from_json(json):
    """Given some JSON representing a repository, extract metadata.

    Returns
    -------
    Repository

    """
    parent = json.get("parent")
    return Repository(
        uuid=json.get("uuid"),
        full_name=json["full_name"],
        name=json.get("name"),
        description=json.get("description"),
        is_private=json.get("is_private"),
        scm=json.get("scm"),
        language=json.get("language"),
        created_on=json.get("created_on"),
        updated_on=json.get("updated_on"),
        owner=account_from_json(json.get("owner")),
        parent=parent["full_name"] if parent else None,
    )


def branch_restriction_from_json(json):
    return BranchRestriction(
        kind=json["kind"],
        pattern=json.get("pattern"),
        id=json.get("id"),
        value=json.get("value"),
        users=tuple(u.get("username", u.get("nickname")) for u in json.get("users", [])),
        groups=tuple(g["slug"] for g in json.get("groups", [])),
    )


def branch_restriction_to_json(restriction):
    """Serialize a BranchRestriction into the body of a POST or PUT.

    The identifier is never part of the body; it belongs in the URL.

    """
    json = {
        "kind": restriction.kind,
        "pattern": restriction.pattern,
        "users": [{"username": u} for u in restriction.users],
        "groups": [{"slug": g} for g in restriction.groups],
    }
    if restriction.value is not None:
        json["value"] = restriction.value
    return json


def commit_from_json(json):
    author = json.get("author") or {}
    return Commit(
        hash=json["hash"],
        message=json.get("message"),
        date=json.get("date"),
        author=author.get("raw"),
        parents=tuple(p["hash"] for p in json.get("parents", [])),
    )


def comment_from_json(json):
    content = json.get("content") or {}
    return Comment(
        id=json["id"],
        content=content.get("raw"),
        user=account_from_json(json.get("user")),
        created_on=json.get("created_on"),
        updated_on=json.get("updated_on"),
    )


def participant_from_json(json):
    return Participant(
        user=account_from_json(json.get("user")),
        role=json.get("role"),
        approved=json.get("approved", False),
        participated_on=json.get("participated_on"),
    )


def _branch_name(endpoint):
    """Extract the branch name from a pull request's source/destination."""
    if not endpoint:
        return ""
    return (endpoint.get("branch") or {}).get("name", "")


def pull_request_from_json(json):
    return PullRequest(
        title=json["title"],
        source_branch=_branch_name(json.get("source")),
        destination_branch=_branch_name(json.get("destination")),
        id=json.get("id"),
        description=json.get("description", ""),
        state=json.get("state"),
        author=account_from_json(json.get("author")),
        close_source_branch=json.get("close_source_branch", False),
        created_on=json.get("created_on"),
        updated_on=json.get("updated_on"),
    )


def pull_request_to_json(pull_request):
    """Serialize a PullRequest into the body of a POST or PUT.

    When no destination branch is given, the key is left out so that the
    service picks the repository's main branch.

    """
    json = {
        "title": pull_request.title,
        "description": pull_request.description,
        "source": {"branch": {"name": pull_request.source_branch}},
        "close_source_branch": pull_request.close_source_branch,
    }
    if pull_request.destination_branch:
        json["destination"] = {"branch": {"name": pull_request.destination_branch}}
    return json


def diff_options_to_params(options):
    """Turn DiffOptions into the query parameters of a diff request."""
    params = {}
    if options.context is not None:
        params["context"] = options.context
    if options.path is not None:
        params["path"] = options.path
    if options.ignore_whitespace:
        params["ignore_whitespace"] = "true"
    return params
