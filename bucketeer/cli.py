"""Command line interface."""

import argparse
import collections
import logging
import os
import pathlib
import sys
import textwrap

from . import exceptions, settings, dotfile
from .models import DiffOptions, PatchOptions
from .resources import RepositoryResource


try:
    _, COLUMNS = os.popen("stty size 2>/dev/null", "r").read().split()
    COLUMNS = int(COLUMNS)
except ValueError:
    COLUMNS = 120


def colorizer(wrapped):
    """Decorator to return unformatted message if BUCKETEER_COLOR is set."""

    def wrapper(message):
        if os.getenv("BUCKETEER_COLOR", "yes") == "no":
            return message

        return wrapped(message)

    return wrapper


_RESET = "\u001b[0m"


@colorizer
def faded(message):
    return "\u001b[30;1m" + message + _RESET


@colorizer
def info(message):
    return "\u001b[35m" + message + _RESET


@colorizer
def info_heading(message):
    return "\u001b[34m" + message + _RESET


@colorizer
def highlight(message):
    return "\u001b[37;1m" + message + _RESET


@colorizer
def bad(message):
    return "\u001b[31m" + message + _RESET


@colorizer
def good(message):
    return "\u001b[32m" + message + _RESET


def fatal_error(msg, code=1):
    print(bad(msg), file=sys.stdout)
    sys.exit(code)


Location = collections.namedtuple(
    "Location", ["remote_name", "account", "repository", "resource"]
)


def parse_repository_locator(locator_string, gateways):
    """Parse a locator of the form <remote>:<account>/<repository>."""
    try:
        remote, rest = locator_string.split(":")
    except ValueError:
        raise ValueError("Must include remote name.")

    if remote not in gateways:
        raise ValueError(f"{remote} not a valid remote.")

    try:
        account, repository = rest.split("/")
    except ValueError:
        raise ValueError("Must be of the form <remote>:<account>/<repository>.")

    if not account or not repository:
        raise ValueError("Account and repository must not be empty.")

    resource = RepositoryResource(account, repository, gateways[remote])
    return Location(remote, account, repository, resource)


def RepositoryLocator(gateways):
    """Creates an argument checker for a repository locator string.

    A repo locator string looks like this:
        remote:account/repository
    """

    def checker(value):
        try:
            return parse_repository_locator(value, gateways)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc))

    return checker


def _format_meta(msg, level=0, spacer="    "):
    """Indent the first line once, the remaining lines twice."""
    lines = textwrap.wrap(msg, COLUMNS) or [""]
    msg = spacer * level + lines[0]
    if len(lines) > 1:
        msg += "\n" + textwrap.indent("\n".join(lines[1:]), prefix=spacer * (level + 1))
    return msg


def _print_field(name, value, level=1):
    if value is None or value == "":
        return
    print(_format_meta(f"{info_heading(name)}: {info(str(value))}", level=level))


def _first_line(message):
    return (message or "").strip().split("\n")[0]


# commands ------------------------------------------------------------------


def cmd_show(args):
    repo = args.locator.resource.get_repository()
    print(highlight(repo.full_name) + faded(f" :: {args.locator.remote_name}"))
    _print_field("description", repo.description)
    _print_field("private", repo.is_private)
    _print_field("scm", repo.scm)
    _print_field("language", repo.language)
    _print_field("forked from", repo.parent)
    _print_field("updated", repo.updated_on)


def cmd_watchers(args):
    for watcher in args.locator.resource.list_watchers():
        print(highlight(watcher.display_name or "") + faded(f" {watcher.uuid}"))


def cmd_forks(args):
    for fork in args.locator.resource.list_forks():
        print(highlight(fork.full_name))
        _print_field("description", fork.description)


def cmd_commits(args):
    for commit in args.locator.resource.list_commits():
        print(info(commit.hash[:12]) + " " + _first_line(commit.message))


def cmd_commit(args):
    commit = args.locator.resource.get_commit(args.revision)
    print(highlight(commit.hash))
    _print_field("author", commit.author)
    _print_field("date", commit.date)
    _print_field("parents", ", ".join(commit.parents))
    print()
    print(textwrap.indent((commit.message or "").rstrip(), "    "))


def cmd_comments(args):
    for comment in args.locator.resource.list_commit_comments(args.revision):
        who = comment.user.display_name if comment.user is not None else "unknown"
        print(highlight(who) + faded(f" :: {comment.created_on}"))
        print(_format_meta(comment.content or "", level=1))


def cmd_approve(args):
    participant = args.locator.resource.approve_commit(args.revision)
    who = participant.user.display_name if participant.user is not None else "you"
    print(good(f"Approved {args.revision} as {who}."))


def cmd_unapprove(args):
    args.locator.resource.delete_commit_approval(args.revision)
    print(good(f"Approval of {args.revision} revoked."))


def cmd_restrictions(args):
    for restriction in args.locator.resource.list_branch_restrictions():
        print(highlight(f"#{restriction.id} {restriction.kind}") + faded(f" :: {restriction.pattern}"))
        _print_field("value", restriction.value)
        _print_field("users", ", ".join(restriction.users))
        _print_field("groups", ", ".join(restriction.groups))


def cmd_diff(args):
    options = DiffOptions(
        args.spec,
        context=args.context,
        path=args.path,
        ignore_whitespace=args.ignore_whitespace,
    )
    print(args.locator.resource.get_diff(options), end="")


def cmd_patch(args):
    print(args.locator.resource.get_patch(PatchOptions(args.spec)), end="")


def cmd_pullrequests(args):
    pull_requests = args.locator.resource.pull_requests_resource()
    for pr in pull_requests.list_pull_requests(args.state):
        print(highlight(f"#{pr.id} {pr.title}") + faded(f" :: {pr.state}"))
        _print_field("branches", f"{pr.source_branch} -> {pr.destination_branch}")
        if pr.author is not None:
            _print_field("author", pr.author.display_name)


# parsers -------------------------------------------------------------------


def _add_command(subparsers, name, cmd, gateways, help=None):
    parser = subparsers.add_parser(name, help=help)
    parser.add_argument(
        "locator",
        type=RepositoryLocator(gateways),
        help="Repository locator. Format: <remote>:<account>/<repository>.",
    )
    parser.set_defaults(cmd=cmd)
    return parser


def configure_parsers(subparsers, gateways):
    _add_command(subparsers, "show", cmd_show, gateways, "Show repository metadata.")
    _add_command(subparsers, "watchers", cmd_watchers, gateways, "List watchers.")
    _add_command(subparsers, "forks", cmd_forks, gateways, "List forks.")
    _add_command(subparsers, "commits", cmd_commits, gateways, "List commits, newest first.")
    _add_command(
        subparsers, "restrictions", cmd_restrictions, gateways, "List branch restrictions."
    )

    for name, cmd, help_msg in [
        ("commit", cmd_commit, "Show a single commit."),
        ("comments", cmd_comments, "List the comments on a commit."),
        ("approve", cmd_approve, "Approve a commit."),
        ("unapprove", cmd_unapprove, "Revoke your approval of a commit."),
    ]:
        parser = _add_command(subparsers, name, cmd, gateways, help_msg)
        parser.add_argument("revision", help="The commit's SHA1.")

    diff_parser = _add_command(subparsers, "diff", cmd_diff, gateways, "Print a diff.")
    diff_parser.add_argument("spec", help="A revision, or a range like rev1..rev2.")
    diff_parser.add_argument("--context", type=int, help="Lines of context.")
    diff_parser.add_argument("--path", help="Limit the diff to this path.")
    diff_parser.add_argument("--ignore-whitespace", action="store_true")

    patch_parser = _add_command(subparsers, "patch", cmd_patch, gateways, "Print a patch.")
    patch_parser.add_argument("spec", help="A revision, or a range like rev1..rev2.")

    pr_parser = _add_command(
        subparsers, "pullrequests", cmd_pullrequests, gateways, "List pull requests."
    )
    pr_parser.add_argument(
        "--state", choices=["OPEN", "MERGED", "DECLINED", "SUPERSEDED"]
    )


def main(argv=None):
    try:
        with (pathlib.Path.cwd() / settings.DOTFILE).open() as fileobj:
            gateways = dotfile.load(fileobj)
    except exceptions.Error as exc:
        fatal_error("Error: " + str(exc))
    except FileNotFoundError:
        fatal_error(f"No {settings.DOTFILE} found in the current directory.")

    parser = argparse.ArgumentParser(prog="bucketeer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests.")
    subparsers = parser.add_subparsers()
    configure_parsers(subparsers, gateways)

    args = parser.parse_args(argv)

    if "cmd" not in args:
        parser.print_usage()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    try:
        args.cmd(args)
    except exceptions.Error as exc:
        fatal_error("Error: " + str(exc))
