"""
Error taxonomy for the installer.

Each error class carries the process exit status the command line uses for it.
None of them are retried: the first failure aborts the remaining pipeline.
"""


class InstallerError(Exception):
    """Base class for every failure that aborts an install or uninstall."""

    exit_code = 1


class PrivilegeError(InstallerError):
    """The process is not running as the superuser."""

    exit_code = 1


class ModuleError(InstallerError):
    """The kernel module could not be loaded."""

    exit_code = 2


class FsError(InstallerError):
    """Copying or removing a deployed file failed."""

    exit_code = 3


class ServiceError(InstallerError):
    """A systemctl call failed or systemd is not available."""

    exit_code = 4


class LockError(InstallerError):
    """Another installer invocation holds the install lock."""

    exit_code = 5
