import json

import requests

import bucketeer.clients
import bucketeer.exceptions
import bucketeer.models
import bucketeer.settings

import pytest


URL = "https://api.example.org/2.0"
REPO_URL = URL + "/repositories/acme/widget"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.reason = "Reason"
        self._body = body
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text
        self.content = text.encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON.")
        return self._body


class FakeSession:
    """Stands in for requests.Session, answering with queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_gateway(*responses):
    gateway = bucketeer.clients.BitbucketGateway("tester", "app-password", url=URL)
    gateway.session = FakeSession(*responses)
    return gateway


REPOSITORY_JSON = {
    "uuid": "{1234}",
    "full_name": "acme/widget",
    "name": "widget",
    "description": "Widgets, made simple.",
    "is_private": True,
    "scm": "git",
    "language": "python",
    "owner": {"uuid": "{acme}", "username": "acme", "display_name": "Acme"},
}


def test_constructor_sets_basic_auth():
    # when
    gateway = bucketeer.clients.BitbucketGateway("tester", "app-password")

    # then
    assert gateway.session.auth == ("tester", "app-password")
    assert gateway.url == bucketeer.settings.API_URL.rstrip("/")


def test_get_repository():
    # given
    gateway = make_gateway(FakeResponse(body=REPOSITORY_JSON))

    # when
    repo = gateway.get_repository("acme", "widget")

    # then
    assert repo.full_name == "acme/widget"
    assert repo.owner.username == "acme"
    method, url, kwargs = gateway.session.requests[0]
    assert (method, url) == ("GET", REPO_URL)
    assert kwargs["timeout"] == bucketeer.settings.timeout()


def test_delete_repository_returns_none_on_no_content():
    # given
    gateway = make_gateway(FakeResponse(status_code=204))

    # when
    result = gateway.delete_repository("acme", "widget")

    # then
    assert result is None
    assert gateway.session.requests[0][:2] == ("DELETE", REPO_URL)


def test_list_watchers_follows_next_links():
    # given
    gateway = make_gateway(
        FakeResponse(
            body={
                "values": [{"uuid": "{1}", "display_name": "One"}],
                "next": REPO_URL + "/watchers?page=2",
            }
        ),
        FakeResponse(body={"values": [{"uuid": "{2}", "display_name": "Two"}]}),
    )

    # when
    watchers = gateway.list_watchers("acme", "widget")

    # then
    assert [w.display_name for w in watchers] == ["One", "Two"]
    first, second = gateway.session.requests
    assert first[1] == REPO_URL + "/watchers"
    assert first[2]["params"] == {"pagelen": bucketeer.settings.PAGE_LENGTH}
    assert second[1] == REPO_URL + "/watchers?page=2"
    assert second[2]["params"] is None


def test_list_commits_preserves_service_order():
    # given
    gateway = make_gateway(
        FakeResponse(
            body={
                "values": [
                    {"hash": "newest", "parents": [{"hash": "older"}]},
                    {"hash": "older", "parents": []},
                ]
            }
        )
    )

    # when
    commits = gateway.list_commits("acme", "widget")

    # then
    assert [c.hash for c in commits] == ["newest", "older"]
    assert commits[0].parents == ("older",)


def test_post_branch_restriction_sends_body():
    # given
    created = {"id": 42, "kind": "push", "pattern": "main", "users": [], "groups": []}
    gateway = make_gateway(FakeResponse(status_code=201, body=created))
    restriction = bucketeer.models.BranchRestriction("push", "main", users=("alice",))

    # when
    result = gateway.post_branch_restriction("acme", "widget", restriction)

    # then
    assert result.id == 42
    method, url, kwargs = gateway.session.requests[0]
    assert (method, url) == ("POST", REPO_URL + "/branch-restrictions")
    assert kwargs["json"] == {
        "kind": "push",
        "pattern": "main",
        "users": [{"username": "alice"}],
        "groups": [],
    }


def test_put_branch_restriction_keeps_kind_and_uses_id_in_url():
    # given
    updated = {"id": 42, "kind": "push", "pattern": "release/*"}
    gateway = make_gateway(FakeResponse(body=updated))
    restriction = bucketeer.models.BranchRestriction("push", "release/*", id=42)

    # when
    gateway.put_branch_restriction("acme", "widget", restriction)

    # then
    method, url, kwargs = gateway.session.requests[0]
    assert (method, url) == ("PUT", REPO_URL + "/branch-restrictions/42")
    assert kwargs["json"]["kind"] == "push"
    assert "id" not in kwargs["json"]


def test_put_branch_restriction_without_id_raises():
    gateway = make_gateway()

    with pytest.raises(ValueError):
        gateway.put_branch_restriction(
            "acme", "widget", bucketeer.models.BranchRestriction("push", "main")
        )

    assert gateway.session.requests == []


def test_get_diff_returns_text_and_sends_options():
    # given
    diff = "diff --git a/README b/README\n"
    gateway = make_gateway(FakeResponse(text=diff))
    options = bucketeer.models.DiffOptions(
        "abc..def", context=5, ignore_whitespace=True
    )

    # when
    result = gateway.get_diff("acme", "widget", options)

    # then
    assert result == diff
    method, url, kwargs = gateway.session.requests[0]
    assert url == REPO_URL + "/diff/abc..def"
    assert kwargs["params"] == {"context": 5, "ignore_whitespace": "true"}


def test_approve_commit_returns_participant():
    # given
    body = {
        "user": {"uuid": "{me}", "display_name": "Me"},
        "role": "PARTICIPANT",
        "approved": True,
    }
    gateway = make_gateway(FakeResponse(body=body))

    # when
    participant = gateway.approve_commit("acme", "widget", "abc123")

    # then
    assert participant.approved
    assert participant.user.display_name == "Me"
    assert gateway.session.requests[0][:2] == (
        "POST",
        REPO_URL + "/commit/abc123/approve",
    )


def test_list_pull_requests_filters_by_state():
    # given
    gateway = make_gateway(FakeResponse(body={"values": []}))

    # when
    gateway.list_pull_requests("acme", "widget", "MERGED")

    # then
    _, url, kwargs = gateway.session.requests[0]
    assert url == REPO_URL + "/pullrequests"
    assert kwargs["params"]["state"] == "MERGED"


def test_not_found_raises_not_found_error_with_service_message():
    # given
    body = {"type": "error", "error": {"message": "Repository acme/widget not found"}}
    gateway = make_gateway(FakeResponse(status_code=404, body=body))

    # when then
    with pytest.raises(bucketeer.exceptions.NotFoundError) as excinfo:
        gateway.get_repository("acme", "widget")

    assert excinfo.value.status == 404
    assert excinfo.value.message == "Repository acme/widget not found"


@pytest.mark.parametrize("status", [401, 403])
def test_unauthorized_raises_authentication_error(status):
    gateway = make_gateway(FakeResponse(status_code=status, text="Denied"))

    with pytest.raises(bucketeer.exceptions.AuthenticationError) as excinfo:
        gateway.list_forks("acme", "widget")

    assert excinfo.value.message == "Denied"


def test_validation_failure_includes_detail():
    body = {"error": {"message": "Bad request", "detail": "kind is invalid"}}
    gateway = make_gateway(FakeResponse(status_code=400, body=body))

    with pytest.raises(bucketeer.exceptions.ClientError) as excinfo:
        gateway.post_branch_restriction(
            "acme", "widget", bucketeer.models.BranchRestriction("nope", "main")
        )

    assert str(excinfo.value) == "Bad request kind is invalid (HTTP 400)"


def test_transport_failure_raises_client_error():
    gateway = make_gateway(requests.ConnectionError("connection refused"))

    with pytest.raises(bucketeer.exceptions.ClientError) as excinfo:
        gateway.get_commit("acme", "widget", "abc123")

    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_get_diff_keeps_branch_names_in_one_path_segment():
    # given
    gateway = make_gateway(FakeResponse(text=""))

    # when
    gateway.get_diff("acme", "widget", bucketeer.models.DiffOptions("feature/x..main"))

    # then
    assert gateway.session.requests[0][1] == REPO_URL + "/diff/feature%2Fx..main"


def test_get_commit_quotes_fragment_and_query_characters():
    gateway = make_gateway(FakeResponse(body={"hash": "abc123"}))

    gateway.get_commit("acme", "widget", "fix#1?x")

    assert gateway.session.requests[0][1] == REPO_URL + "/commit/fix%231%3Fx"


def test_list_forks_with_empty_page_returns_nothing():
    gateway = make_gateway(FakeResponse(status_code=200, text=""))

    assert gateway.list_forks("acme", "widget") == []


def test_malformed_timeout_raises_error(monkeypatch):
    # given
    monkeypatch.setattr(bucketeer.settings, "TIMEOUT", "soon")
    gateway = make_gateway(FakeResponse(body=REPOSITORY_JSON))

    # when then
    with pytest.raises(bucketeer.exceptions.Error) as excinfo:
        gateway.get_repository("acme", "widget")

    assert "BUCKETEER_TIMEOUT" in str(excinfo.value)
    assert gateway.session.requests == []


PR = bucketeer.models.PullRequest("Fix", "feature/fix", "main", id=3)
RESTRICTION = bucketeer.models.BranchRestriction("push", "main", id=42)
COMMIT_JSON = {"hash": "abc123"}
COMMENT_JSON = {"id": 7, "content": {"raw": "Nice"}}
PR_JSON = {"id": 3, "title": "Fix", "source": {"branch": {"name": "feature/fix"}}}
PARTICIPANT_JSON = {"user": {"uuid": "{me}"}, "approved": True}
RESTRICTION_JSON = {"id": 42, "kind": "push", "pattern": "main"}


def page(*values):
    return FakeResponse(body={"values": list(values)})


# (operation, extra arguments, canned response, HTTP method, path below REPO_URL)
ROUTES = [
    ("get_repository", (), FakeResponse(body=REPOSITORY_JSON), "GET", ""),
    ("delete_repository", (), FakeResponse(status_code=204), "DELETE", ""),
    ("list_watchers", (), page(), "GET", "/watchers"),
    ("list_forks", (), page(REPOSITORY_JSON), "GET", "/forks"),
    ("list_branch_restrictions", (), page(RESTRICTION_JSON), "GET", "/branch-restrictions"),
    ("post_branch_restriction", (RESTRICTION,), FakeResponse(body=RESTRICTION_JSON), "POST", "/branch-restrictions"),
    ("get_branch_restriction", (42,), FakeResponse(body=RESTRICTION_JSON), "GET", "/branch-restrictions/42"),
    ("put_branch_restriction", (RESTRICTION,), FakeResponse(body=RESTRICTION_JSON), "PUT", "/branch-restrictions/42"),
    ("delete_branch_restriction", (42,), FakeResponse(status_code=204), "DELETE", "/branch-restrictions/42"),
    ("get_diff", (bucketeer.models.DiffOptions("abc123"),), FakeResponse(text="d"), "GET", "/diff/abc123"),
    ("get_patch", (bucketeer.models.PatchOptions("abc123"),), FakeResponse(text="p"), "GET", "/patch/abc123"),
    ("list_commits", (), page(COMMIT_JSON), "GET", "/commits"),
    ("get_commit", ("abc123",), FakeResponse(body=COMMIT_JSON), "GET", "/commit/abc123"),
    ("list_commit_comments", ("abc123",), page(COMMENT_JSON), "GET", "/commit/abc123/comments"),
    ("get_commit_comment", ("abc123", 7), FakeResponse(body=COMMENT_JSON), "GET", "/commit/abc123/comments/7"),
    ("approve_commit", ("abc123",), FakeResponse(body=PARTICIPANT_JSON), "POST", "/commit/abc123/approve"),
    ("delete_commit_approval", ("abc123",), FakeResponse(status_code=204), "DELETE", "/commit/abc123/approve"),
    ("list_pull_requests", (), page(PR_JSON), "GET", "/pullrequests"),
    ("post_pull_request", (PR,), FakeResponse(status_code=201, body=PR_JSON), "POST", "/pullrequests"),
    ("get_pull_request", (3,), FakeResponse(body=PR_JSON), "GET", "/pullrequests/3"),
    ("put_pull_request", (PR,), FakeResponse(body=PR_JSON), "PUT", "/pullrequests/3"),
    ("list_pull_request_commits", (3,), page(COMMIT_JSON), "GET", "/pullrequests/3/commits"),
    ("list_pull_request_comments", (3,), page(COMMENT_JSON), "GET", "/pullrequests/3/comments"),
    ("approve_pull_request", (3,), FakeResponse(body=PARTICIPANT_JSON), "POST", "/pullrequests/3/approve"),
    ("delete_pull_request_approval", (3,), FakeResponse(status_code=204), "DELETE", "/pullrequests/3/approve"),
    ("get_pull_request_diff", (3,), FakeResponse(text="d"), "GET", "/pullrequests/3/diff"),
    ("merge_pull_request", (3,), FakeResponse(body=PR_JSON), "POST", "/pullrequests/3/merge"),
    ("decline_pull_request", (3,), FakeResponse(body=PR_JSON), "POST", "/pullrequests/3/decline"),
]


@pytest.mark.parametrize(
    "name,extra,response,method,path", ROUTES, ids=[r[0] for r in ROUTES]
)
def test_operation_uses_documented_method_and_path(name, extra, response, method, path):
    # given
    gateway = make_gateway(response)

    # when
    getattr(gateway, name)("acme", "widget", *extra)

    # then
    assert len(gateway.session.requests) == 1
    assert gateway.session.requests[0][:2] == (method, REPO_URL + path)


def test_put_pull_request_sends_body():
    gateway = make_gateway(FakeResponse(body=PR_JSON))

    gateway.put_pull_request("acme", "widget", PR)

    assert gateway.session.requests[0][2]["json"] == {
        "title": "Fix",
        "description": "",
        "source": {"branch": {"name": "feature/fix"}},
        "destination": {"branch": {"name": "main"}},
        "close_source_branch": False,
    }


def test_put_pull_request_without_id_raises():
    gateway = make_gateway()

    with pytest.raises(ValueError):
        gateway.put_pull_request(
            "acme", "widget", bucketeer.models.PullRequest("Fix", "feature/fix")
        )

    assert gateway.session.requests == []


@pytest.mark.parametrize(
    "message,body", [(None, {}), ("Merged in feature/fix", {"message": "Merged in feature/fix"})]
)
def test_merge_pull_request_sends_message_only_when_given(message, body):
    gateway = make_gateway(FakeResponse(body=PR_JSON))

    gateway.merge_pull_request("acme", "widget", 3, message)

    assert gateway.session.requests[0][2]["json"] == body
