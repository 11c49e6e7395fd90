"""Pytest configuration and shared fixtures."""

import os
import subprocess
from pathlib import Path

import pytest

from touchpad_installer.execution_context import ExecutionContext
from touchpad_installer.layout import BINARY_SOURCE, UNIT_SOURCE, InstallLayout


UNIT_CONTENT = """[Unit]
Description=Asus Touchpad Numpad Driver

[Service]
ExecStart=/usr/share/asus-touchpad/asus-touchpad

[Install]
WantedBy=multi-user.target
"""


class FakeHost(ExecutionContext):
    """
    ExecutionContext backed by a temporary root directory.

    Files are really written under the root. modprobe creates the module's
    /sys/module entry and systemctl keeps enabled/active sets, refusing to
    enable, start or disable a unit whose file is missing, like systemd does.
    Units in ``activating`` model a crash-looping service waiting on its
    restart timer: not active, but still loaded.
    Every mutating call is appended to ``calls`` in execution order.
    """

    def __init__(self, root: Path, euid: int = 0, dry_run: bool = False):
        super().__init__(dry_run=dry_run)
        self.layout = InstallLayout(str(root))
        os.makedirs(self.layout.sysfs_module_dir, exist_ok=True)
        os.makedirs(self.layout.service_dir, exist_ok=True)
        os.makedirs(os.path.dirname(self.layout.lock_path), exist_ok=True)
        self.euid = euid
        self.programs = {'systemctl', 'modprobe'}
        self.enabled = set()
        self.active = set()
        self.activating = set()
        self.failures = {}
        self.calls = []
        self.output = []

    # identity and lookups

    def geteuid(self):
        return self.euid

    def which(self, program):
        return f"/usr/bin/{program}" if program in self.programs else None

    def print(self, *args, **kwargs):
        self.output.append(" ".join(str(a) for a in args))
        super().print(*args, **kwargs)

    # filesystem

    def makedirs(self, path, exist_ok=False, mode=0o755):
        if not self.dry_run:
            self.calls.append(('makedirs', str(path)))
        return super().makedirs(path, exist_ok=exist_ok, mode=mode)

    def copy2(self, src, dst):
        if not self.dry_run:
            self.calls.append(('copy2', str(dst)))
        return super().copy2(src, dst)

    def replace(self, src, dst):
        if not self.dry_run:
            self.calls.append(('replace', str(dst)))
        return super().replace(src, dst)

    def chmod(self, path, mode):
        if not self.dry_run:
            self.calls.append(('chmod', str(path)))
        return super().chmod(path, mode)

    def remove(self, path):
        if not self.dry_run:
            self.calls.append(('remove', str(path)))
        return super().remove(path)

    # module table and service manager

    def fail(self, *cmd, returncode=1, stderr="simulated failure"):
        """Make the given command exit with an error"""
        self.failures[tuple(cmd)] = (returncode, stderr)

    def unit_file_exists(self):
        return os.path.exists(self.layout.unit_path)

    def load_state(self, unit):
        if self.unit_file_exists() or unit in self.active or unit in self.activating:
            return 'loaded'
        return 'not-found'

    def run(self, cmd, **kwargs):
        if self.dry_run:
            return super().run(cmd, **kwargs)

        cmd = list(cmd)
        self.calls.append(tuple(cmd))
        if cmd[0] not in self.programs:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if tuple(cmd) in self.failures:
            returncode, stderr = self.failures[tuple(cmd)]
            return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)

        if cmd[0] == 'modprobe':
            os.makedirs(os.path.join(self.layout.sysfs_module_dir, cmd[1].replace('-', '_')), exist_ok=True)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        return self._systemctl(cmd)

    def _systemctl(self, cmd):
        verb = cmd[1]
        unit = cmd[2] if len(cmd) > 2 else None
        missing = subprocess.CompletedProcess(
            cmd, 1, stdout="", stderr=f"Failed to {verb} unit: Unit file {unit} does not exist.")

        if verb == 'daemon-reload':
            pass
        elif verb == 'enable':
            if not self.unit_file_exists():
                return missing
            self.enabled.add(unit)
        elif verb == 'start':
            if not self.unit_file_exists():
                return missing
            self.active.add(unit)
        elif verb == 'stop':
            if self.load_state(unit) != 'loaded':
                return subprocess.CompletedProcess(cmd, 5, stdout="", stderr=f"Failed to stop {unit}: Unit not loaded.")
            self.active.discard(unit)
            self.activating.discard(unit)
        elif verb == 'disable':
            if not self.unit_file_exists():
                return missing
            self.enabled.discard(unit)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    def saferun(self, cmd, **kwargs):
        verb, unit = cmd[1], cmd[-1]
        if verb == 'show':
            return subprocess.CompletedProcess(cmd, 0, stdout=self.load_state(unit) + "\n", stderr="")
        if verb == 'is-active':
            if unit in self.active:
                return subprocess.CompletedProcess(cmd, 0, stdout="active\n", stderr="")
            if unit in self.activating:
                return subprocess.CompletedProcess(cmd, 3, stdout="activating\n", stderr="")
            return subprocess.CompletedProcess(cmd, 3, stdout="inactive\n", stderr="")
        if verb == 'is-enabled':
            if unit in self.enabled:
                return subprocess.CompletedProcess(cmd, 0, stdout="enabled\n", stderr="")
            return subprocess.CompletedProcess(cmd, 1, stdout="disabled\n", stderr="")
        raise AssertionError(f"unexpected read-only command: {cmd}")

    def system_exit(self, code=0):
        raise SystemExit(code)

    # helpers for assertions

    def module_loaded(self, name='i2c-dev'):
        return os.path.isdir(os.path.join(self.layout.sysfs_module_dir, name.replace('-', '_')))

    def mutating_verbs(self):
        """Calls reduced to ('modprobe', 'i2c-dev'), ('systemctl', 'stop'), ('copy2', ...)"""
        return [call[:2] for call in self.calls]


@pytest.fixture()
def make_host(tmp_path: Path):
    def _make(euid=0, dry_run=False):
        return FakeHost(tmp_path / "root", euid=euid, dry_run=dry_run)
    return _make


@pytest.fixture()
def host(make_host) -> FakeHost:
    return make_host()


@pytest.fixture()
def source_dir(tmp_path: Path) -> Path:
    """A checkout with a built driver binary and the unit file."""
    src = tmp_path / "src"
    binary = src / BINARY_SOURCE
    binary.parent.mkdir(parents=True)
    binary.write_bytes(b"\x7fELF fake driver")
    binary.chmod(0o644)
    (src / UNIT_SOURCE).write_text(UNIT_CONTENT)
    return src
