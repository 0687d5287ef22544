# glr/pipeline.py
"""
End-to-end reindex run.

    discover -> filter -> sort -> (verify revisions) -> build -> write -> delegate

Every stage receives its settings explicitly from CliArgs; the network
(GitLab) and the child processes (git, livegrep-fetch-reindex) are the only
side effects, and both can be replaced through keyword arguments.
"""

from __future__ import annotations

import logging
import sys

from glr.cli import CliArgs
from glr.client import GitlabProjectLister, connect
from glr.delegate import FETCH_REINDEX_BINARY, ReindexDelegator, build_reindex_args, resolve_binary
from glr.filters import FilterPolicy, filter_repos, sort_repos
from glr.ignorelist import load_ignorelist
from glr.models import IndexSpec
from glr.process import ProcessRunner, SubprocessRunner
from glr.revisions import RevisionVerifier
from glr.spec_builder import build_index_spec, password_env_for
from glr.spec_writer import write_index_spec
from glr.utils import logging_utils


def _mk_lister(args: CliArgs, logger: logging.Logger) -> GitlabProjectLister:
    gl = connect(
        args.url,
        args.token,
        timeout=args.timeout,
        proxy=args.proxy,
        ssl_verify=not args.insecure,
        logger=logger,
    )
    return GitlabProjectLister(gl, logger=logger)


def filter_policy(args: CliArgs) -> FilterPolicy:
    """Load the ignore list (if any) and derive the filter policy from CLI args."""
    ignore = load_ignorelist(args.ignorelist) if args.ignorelist else None
    return FilterPolicy(
        exclude_forks=not args.forks,
        exclude_archived=not args.archived,
        ignore=ignore,
    )


def run(
        args: CliArgs,
        *,
        lister: GitlabProjectLister | None = None,
        runner: ProcessRunner | None = None,
        argv0: str | None = None,
        logger: logging.Logger | None = None,
) -> IndexSpec:
    """
    Execute one reindex run.

    Args:
        args: Parsed configuration.
        lister: Project lister to use instead of connecting to args.url.
        runner: Process runner for git and the delegate.
        argv0: Invocation path used to locate livegrep-fetch-reindex
            (defaults to sys.argv[0]).
        logger: Logger to use instead of building one from args.

    Returns:
        The IndexSpec that was written and handed to the delegate.

    Raises:
        GitlabReindexError: On any fatal condition (see glr.exceptions).
    """
    logger = logger or logging_utils.build_logger(
        level=logging_utils.coerce_log_level(args.log_level),
        log_file=args.log_file,
    )
    runner = runner or SubprocessRunner()

    policy = filter_policy(args)

    lister = lister or _mk_lister(args, logger)
    repos = lister.collect_projects(
        args.groups,
        per_page=args.per_page,
        archived=False if policy.exclude_archived else None,
    )

    repos = sort_repos(filter_repos(repos, policy, logger=logger))

    verifier = RevisionVerifier(args.repo_dir, runner=runner, logger=logger) if args.skip_missing else None
    spec = build_index_spec(
        args.name,
        args.repo_dir,
        repos,
        args.revision,
        use_http=args.http,
        password_env=password_env_for(args.token),
        depth=args.depth,
        http_username=args.http_user,
        url_pattern=args.url_pattern,
        verifier=verifier,
        logger=logger,
    )

    spec_path = write_index_spec(spec, args.spec_path)
    logger.info("Wrote index specification with %s repositories: %s", len(spec.repositories), spec_path)

    binary = args.fetch_reindex or resolve_binary(FETCH_REINDEX_BINARY, argv0 if argv0 is not None else sys.argv[0])
    reindex_args = build_reindex_args(
        index_path=args.index_path,
        codesearch=args.codesearch,
        num_workers=args.num_workers,
        spec_path=args.spec_path,
        no_index=args.no_index,
        revparse=args.revparse,
        skip_missing=args.skip_missing,
    )
    ReindexDelegator(runner, logger=logger).run(binary, reindex_args, token=args.token)

    return spec
