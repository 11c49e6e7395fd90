"""
Execution context for dry-run and actual execution modes.

Every host operation the installer performs (filesystem changes, systemctl and
modprobe calls, identity lookups) goes through an ExecutionContext, so dry
runs can log instead of executing and tests can substitute a fake host.
"""

import glob
import os
import pwd
import sys
import subprocess
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional, Union

# Re-export the subprocess failure base class
SubprocessError = subprocess.SubprocessError

path_join = os.path.join


class ExecutionContext:
    """
    Execution context that can run in dry-run or actual mode.

    In dry-run mode, mutating operations are intercepted and logged.
    Read-only operations (exists, saferun, geteuid) always execute.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.operations_log = []

    def log_operation(self, operation: str):
        """Log an operation that would be performed"""
        log_entry = f"[DRY RUN] Would execute: {operation}"

        print(log_entry)
        self.operations_log.append(log_entry)

    def print(self, *args, **kwargs):
        """Print with optional dry-run prefix"""
        if self.dry_run and args and isinstance(args[0], str):
            args = (f"[DRY RUN] {args[0]}",) + args[1:]
        print(*args, **kwargs)

    def geteuid(self) -> int:
        return os.geteuid()

    def which(self, program: str) -> Optional[str]:
        return shutil.which(program)

    def makedirs(self, path: Union[str, Path], exist_ok: bool = False, mode: int = 0o755):
        """Create directories (dry-run aware)"""
        if self.dry_run:
            self.log_operation(f"os.makedirs('{path}', exist_ok={exist_ok}, mode={oct(mode)})")
            return
        return os.makedirs(path, exist_ok=exist_ok, mode=mode)

    def saferun(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        """
        Run subprocess command for read-only operations with temporarily dropped privileges if root.

        When running as root, temporarily drops to 'nobody' user.
        Always executes (even in dry-run) since these are read-only operations.
        """
        if os.geteuid() == 0:
            return self._run_with_dropped_privileges(cmd, **kwargs)
        return subprocess.run(cmd, **kwargs)

    def run(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        """Run subprocess command (dry-run aware)"""
        if self.dry_run:
            self.log_operation(f"subprocess.run({cmd})")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")
        return subprocess.run(cmd, **kwargs)

    def remove(self, path: Union[str, Path]):
        """Remove file (dry-run aware)"""
        if self.dry_run:
            self.log_operation(f"os.remove('{path}')")
            return
        return os.remove(path)

    def copy2(self, src: Union[str, Path], dst: Union[str, Path]):
        """Copy file with metadata (dry-run aware)"""
        if self.dry_run:
            self.log_operation(f"shutil.copy2('{src}', '{dst}')")
            return
        return shutil.copy2(src, dst)

    def replace(self, src: Union[str, Path], dst: Union[str, Path]):
        """Atomically move a file over another one (dry-run aware)"""
        if self.dry_run:
            self.log_operation(f"os.replace('{src}', '{dst}')")
            return
        return os.replace(src, dst)

    def chmod(self, path: Union[str, Path], mode: int):
        """Change file permissions (dry-run aware)"""
        if self.dry_run:
            self.log_operation(f"os.chmod('{path}', {oct(mode)})")
            return
        return os.chmod(path, mode)

    def exists(self, path: Union[str, Path]) -> bool:
        return os.path.exists(path)

    def glob(self, pattern: str) -> List[str]:
        return glob.glob(pattern)

    def system_exit(self, code: int = 0):
        sys.exit(code)

    def _run_with_dropped_privileges(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        """
        Helper method to run commands with temporarily dropped privileges when root.
        Uses seteuid() to temporarily switch to 'nobody' user.
        """
        try:
            nobody = pwd.getpwnam('nobody')
        except KeyError:
            # No unprivileged account to switch to
            return subprocess.run(cmd, **kwargs)

        original_euid = os.geteuid()
        original_egid = os.getegid()

        try:
            os.setegid(nobody.pw_gid)
            os.seteuid(nobody.pw_uid)
            return subprocess.run(cmd, **kwargs)
        finally:
            # Restore original privileges
            os.seteuid(original_euid)
            os.setegid(original_egid)


@contextmanager
def execution_context(dry_run: bool = False, context: Optional[ExecutionContext] = None):
    """
    Context manager for execution mode.

    Usage:
        with execution_context(dry_run=True) as ctx:
            # All mutating operations will be logged instead of executed
            ctx.makedirs('/some/path')
            ctx.run(['systemctl', 'start', 'asus-touchpad'])

    A prepared context (e.g. a fake host in tests) can be passed instead.
    """
    yield context if context is not None else ExecutionContext(dry_run=dry_run)
