"""
systemd registration of the driver service.

Mutating systemctl calls go through ctx.run and raise ServiceError on failure.
State queries go through ctx.saferun and never raise for a unit that is
unknown to systemd.
"""

from .errors import ServiceError
from .execution_context import ExecutionContext, SubprocessError


def _systemctl(ctx: ExecutionContext, *args):
    cmd = ['systemctl'] + list(args)
    try:
        result = ctx.run(cmd, capture_output=True, text=True)
    except (SubprocessError, OSError) as e:
        raise ServiceError(f"Could not run {' '.join(cmd)}: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise ServiceError(f"{' '.join(cmd)} failed with exit code {result.returncode}: {stderr}")
    return result


def _query(ctx: ExecutionContext, verb: str, unit_name: str) -> bool:
    try:
        result = ctx.saferun(['systemctl', verb, unit_name], capture_output=True, text=True)
    except (SubprocessError, OSError):
        return False
    return result.returncode == 0


def load_state(ctx: ExecutionContext, unit_name: str) -> str:
    """systemd's LoadState for the unit: loaded, not-found, masked, ..."""
    try:
        result = ctx.saferun(['systemctl', 'show', '-p', 'LoadState', '--value', unit_name],
                             capture_output=True, text=True)
    except (SubprocessError, OSError):
        return ""
    if result.returncode != 0:
        return ""
    return (result.stdout or "").strip()


def is_active(ctx: ExecutionContext, unit_name: str) -> bool:
    return _query(ctx, 'is-active', unit_name)


def is_enabled(ctx: ExecutionContext, unit_name: str) -> bool:
    return _query(ctx, 'is-enabled', unit_name)


def check_systemd_available(ctx: ExecutionContext):
    """Make sure systemctl can be found before touching anything"""
    if ctx.which('systemctl') is None:
        raise ServiceError("systemctl not found. This installer requires a systemd-based distribution.")


def reload_units(ctx: ExecutionContext):
    """Make systemd pick up added or removed unit files"""
    _systemctl(ctx, 'daemon-reload')
    ctx.print("✓ Systemd daemon reloaded")


def register_and_start(ctx: ExecutionContext, unit_name: str):
    """
    Enable the unit for boot, then start it.

    A failed start leaves the unit enabled. Nothing is rolled back; running
    the install again is the way to recover.
    """
    ctx.print(f"Enabling and starting {unit_name}...")
    reload_units(ctx)

    _systemctl(ctx, 'enable', unit_name)
    ctx.print("✓ Service enabled to start on boot")

    _systemctl(ctx, 'start', unit_name)
    ctx.print("✓ Service started")


def stop_and_deregister(ctx: ExecutionContext, unit_name: str):
    """
    Stop then disable, so the service is never left running unregistered.

    Both run whenever systemd still has the unit loaded, whatever is-active
    says: a crash-looping unit reports "activating" and still has a restart
    queued. A unit systemd no longer knows has nothing to stop or disable.
    """
    ctx.print(f"Stopping and disabling {unit_name}...")
    state = load_state(ctx, unit_name)
    if state != 'loaded':
        ctx.print(f"  ✓ Service {unit_name} is not loaded ({state or 'unknown'})")
        return

    _systemctl(ctx, 'stop', unit_name)
    ctx.print(f"  ✓ Service {unit_name} stopped")

    _systemctl(ctx, 'disable', unit_name)
    ctx.print(f"  ✓ Service {unit_name} disabled")
