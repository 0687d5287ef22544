from __future__ import annotations

import argparse
import os
import posixpath
from dataclasses import dataclass

from glr.models import DEFAULT_URL_PATTERN, PASSWORD_ENV

DEFAULT_URL = "https://gitlab.example.com"
DEFAULT_REPO_DIR = "repos"
INDEX_FILENAME = "livegrep.idx"
SPEC_FILENAME = "livegrep.json"


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    v = value.strip()
    if v.isdigit() and int(v) > 0:
        return int(v)
    raise argparse.ArgumentTypeError("Use a positive integer (e.g., 8).")


def non_negative_int(value: str) -> int:
    v = value.strip()
    if v.isdigit():
        return int(v)
    raise argparse.ArgumentTypeError("Use 0 or a positive integer.")


@dataclass(frozen=True, slots=True)
class CliArgs:
    url: str
    token: str
    proxy: str | None
    timeout: int | None
    insecure: bool
    per_page: int

    groups: tuple[str, ...]
    repo_dir: str
    ignorelist: str | None

    index_path: str
    spec_path: str
    codesearch: str
    fetch_reindex: str | None

    name: str
    revision: str
    url_pattern: str
    num_workers: int

    revparse: bool
    forks: bool
    archived: bool
    http: bool
    http_user: str
    depth: int
    skip_missing: bool
    no_index: bool

    log_level: str
    log_file: str | None


class CliParser:
    """Argument parser builder for the GitLab reindex CLI."""

    @staticmethod
    def build() -> argparse.ArgumentParser:
        """
        Construct the argument parser.

        Option groups:
            - GitLab connectivity (URL, token, proxy, timeout, page size).
            - Discovery and filtering (groups, forks, archived, ignore list).
            - Index specification contents (dir, revision, name, URLs, cloning).
            - Delegation to livegrep-fetch-reindex (binaries, workers, flags).
            - Logging.
        """
        parser = argparse.ArgumentParser(
            prog="livegrep-gitlab-reindex",
            description=(
                "Discover GitLab repositories, write a livegrep index specification "
                "and run livegrep-fetch-reindex on it."
            ),
        )

        conn = parser.add_argument_group("GitLab connectivity")
        conn.add_argument(
            "-u", "--url", "--api-base-url",
            dest="url",
            default=DEFAULT_URL,
            help=f"GitLab instance or API base URL; a trailing /api/v4 is accepted (default: {DEFAULT_URL}).",
        )
        conn.add_argument(
            "-t", "--gitlab-token",
            dest="token",
            default=os.environ.get(PASSWORD_ENV, ""),
            help=f"GitLab access token (default: ${PASSWORD_ENV}).",
        )
        conn.add_argument(
            "-p", "--proxy",
            default=None,
            help="HTTP(S) proxy URL for GitLab API traffic (e.g., http://127.0.0.1:8080).",
        )
        conn.add_argument(
            "--timeout",
            type=positive_int,
            default=None,
            help="GitLab API timeout in seconds (default: none, wait for the server).",
        )
        conn.add_argument(
            "--insecure",
            action="store_true",
            help="Skip TLS certificate verification for GitLab API traffic.",
        )
        conn.add_argument(
            "--per-page",
            type=positive_int,
            default=100,
            help="Projects per page for GitLab API requests (default: 100).",
        )

        disc = parser.add_argument_group("Discovery")
        disc.add_argument(
            "--group",
            dest="groups",
            action="append",
            default=[],
            help="GitLab group to index (may be passed multiple times). Without it, every accessible project is indexed.",
        )
        disc.add_argument(
            "--forks",
            action=argparse.BooleanOptionalAction,
            default=True,
            help="Index repositories that are forks (default: yes).",
        )
        disc.add_argument(
            "--archived",
            action=argparse.BooleanOptionalAction,
            default=False,
            help="Index repositories that are archived on GitLab (default: no).",
        )
        disc.add_argument(
            "--ignorelist",
            default=None,
            help="File with repositories (namespace/path, one per line) to leave out.",
        )

        spec = parser.add_argument_group("Index specification")
        spec.add_argument("--dir", dest="repo_dir", default=DEFAULT_REPO_DIR, help="Directory to store repos (default: repos).")
        spec.add_argument("--out", dest="index_path", default=None, help=f"Path to write the index (default: ${{dir}}/{INDEX_FILENAME}).")
        spec.add_argument(
            "--spec-file",
            dest="spec_path",
            default=None,
            help=f"Path of the generated index specification (default: ${{dir}}/{SPEC_FILENAME}).",
        )
        spec.add_argument("--name", default="livegrep index", help="The name to be stored in the index file.")
        spec.add_argument("--revision", default="HEAD", help="git revision to index (default: HEAD).")
        spec.add_argument(
            "--url-pattern",
            default=DEFAULT_URL_PATTERN,
            help="Template used by the file viewer to link back to the source on GitLab.",
        )
        spec.add_argument("--http", action="store_true", help="Clone repositories over HTTPS instead of SSH.")
        spec.add_argument("--http-user", default="git", help="Username to use when cloning over HTTPS (default: git).")
        spec.add_argument(
            "--depth",
            type=non_negative_int,
            default=0,
            help="Shallow clone depth; 0 clones full history (default: 0).",
        )

        dlg = parser.add_argument_group("livegrep-fetch-reindex")
        dlg.add_argument("--codesearch", default="", help="Path to the `codesearch` binary.")
        dlg.add_argument(
            "--fetch-reindex",
            default=None,
            help="Path to the `livegrep-fetch-reindex` binary (default: next to this program, then $PATH).",
        )
        dlg.add_argument(
            "--num-repo-update-workers",
            dest="num_workers",
            type=positive_int,
            default=8,
            help="Number of workers fetch-reindex uses to update repositories (default: 8).",
        )
        dlg.add_argument(
            "--revparse",
            action=argparse.BooleanOptionalAction,
            default=True,
            help="`git rev-parse` the revision in generated links (default: yes).",
        )
        dlg.add_argument(
            "--skip-missing",
            action="store_true",
            help="Skip repositories where the revision is missing from the local clone.",
        )
        dlg.add_argument("--no-index", action="store_true", help="Skip indexing after writing config and fetching.")

        log = parser.add_argument_group("Logging")
        log.add_argument(
            "--log-level",
            default="INFO",
            choices=("DEBUG", "INFO", "WARNING", "ERROR"),
            type=str.upper,
            help="Log level (default: INFO).",
        )
        log.add_argument("--log-file", default=None, help="Also write log records to this file.")

        return parser

    @classmethod
    def parse(cls, argv: list[str] | None = None) -> CliArgs:
        """
        Parse CLI arguments and resolve defaults that depend on other options.

        --out and --spec-file default to files inside --dir, so they are
        filled in after parsing.
        """
        ns = cls.build().parse_args(argv)

        index_path = ns.index_path or posixpath.join(ns.repo_dir, INDEX_FILENAME)
        spec_path = ns.spec_path or posixpath.join(ns.repo_dir, SPEC_FILENAME)

        return CliArgs(
            url=ns.url,
            token=ns.token,
            proxy=ns.proxy,
            timeout=ns.timeout,
            insecure=ns.insecure,
            per_page=ns.per_page,

            groups=tuple(ns.groups),
            repo_dir=ns.repo_dir,
            ignorelist=ns.ignorelist,

            index_path=index_path,
            spec_path=spec_path,
            codesearch=ns.codesearch,
            fetch_reindex=ns.fetch_reindex,

            name=ns.name,
            revision=ns.revision,
            url_pattern=ns.url_pattern,
            num_workers=ns.num_workers,

            revparse=ns.revparse,
            forks=ns.forks,
            archived=ns.archived,
            http=ns.http,
            http_user=ns.http_user,
            depth=ns.depth,
            skip_missing=ns.skip_missing,
            no_index=ns.no_index,

            log_level=ns.log_level,
            log_file=ns.log_file,
        )
