"""
glr — GitLab reindex for livegrep
=================================

Builds a livegrep index specification from the repositories of a GitLab
instance and hands it to `livegrep-fetch-reindex` for cloning and indexing.

Modules
-------

cli
    Argument parser producing the immutable CliArgs configuration.

client
    GitLab API client construction and paginated project discovery.

ignorelist / filters
    Ignore-list loading and fork / ignore-list filtering.

revisions
    Local `git rev-parse --verify` check used by --skip-missing.

spec_builder / spec_writer
    IndexSpec construction and JSON persistence.

delegate / process
    livegrep-fetch-reindex command line, binary lookup and execution.

pipeline
    The end-to-end run tying the stages together.

Typical usage
-------------

As a CLI:

    livegrep-gitlab-reindex --url https://gitlab.example.com \
        --group platform --group tools --no-forks --dir /data/repos

"""

from .cli import CliArgs, CliParser
from .pipeline import run

__all__ = [
    "CliArgs",
    "CliParser",
    "run",
]
