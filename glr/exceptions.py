class GitlabReindexError(Exception):
    """
    Base exception for gitlab-reindex errors.

    Every unrecoverable condition of the reindex pipeline is raised as a
    subclass of this type, so the entrypoint can report it once and exit.
    """
    pass


class ConfigError(GitlabReindexError):
    """Invalid or unreadable configuration input (ignore list, proxy URL)."""


class DiscoveryError(GitlabReindexError):
    """GitLab client construction or project listing failed."""


class SpecWriteError(GitlabReindexError):
    """The index specification could not be persisted."""


class DelegateError(GitlabReindexError):
    """
    The external reindex binary could not be launched or exited non-zero.

    Attributes:
        returncode: Exit status of the child, or None if it never started.
    """

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
