"""Privilege guard run before any step that touches the host."""

from .errors import PrivilegeError
from .execution_context import ExecutionContext


def check_privilege(ctx: ExecutionContext):
    """
    Abort unless the process runs as root.

    In dry-run mode nothing is mutated, so a non-root principal only gets a
    warning.
    """
    if ctx.geteuid() == 0:
        return
    if ctx.dry_run:
        ctx.print("⚠ Not running as root - a real run would be refused")
        return
    raise PrivilegeError("run as root (e.g. with sudo)")
