"""
Install and uninstall pipelines for the asus-touchpad driver service.

Each pipeline is a fixed sequence of steps. A step either completes or raises
an InstallerError, which aborts every later step. Nothing is rolled back:
re-running the same command converges the host to the intended state.
"""

from contextlib import contextmanager

import filelock

from .errors import LockError
from .execution_context import ExecutionContext
from .file_deployer import deploy, undeploy
from .kernel_module import ensure_module_loaded, is_module_loaded
from .layout import APP_NAME, MODULE_NAME, UNIT_NAME, InstallLayout, default_sources
from .privilege import check_privilege
from .service_registrar import (
    check_systemd_available,
    is_active,
    is_enabled,
    register_and_start,
    reload_units,
    stop_and_deregister,
)


class InstallStatus:
    """Snapshot of every host resource the installer manages."""

    def __init__(self, module_loaded, binary_present, unit_present, enabled, active):
        self.module_loaded = module_loaded
        self.binary_present = binary_present
        self.unit_present = unit_present
        self.enabled = enabled
        self.active = active

    @property
    def installed(self) -> bool:
        return all((self.module_loaded, self.binary_present, self.unit_present, self.enabled, self.active))

    @property
    def removed(self) -> bool:
        return not any((self.binary_present, self.unit_present, self.enabled, self.active))

    def as_dict(self):
        return {
            'module_loaded': self.module_loaded,
            'binary_present': self.binary_present,
            'unit_present': self.unit_present,
            'enabled': self.enabled,
            'active': self.active,
        }


@contextmanager
def install_lock(ctx: ExecutionContext, layout: InstallLayout):
    """Hold the installer lock for the duration of a pipeline (skipped in dry runs)"""
    if ctx.dry_run:
        yield
        return

    lock = filelock.FileLock(layout.lock_path, timeout=1)
    try:
        with lock.acquire():
            yield
    except filelock.Timeout as e:
        raise LockError(f"Another installer is running (lock held: {layout.lock_path})") from e


def install(ctx: ExecutionContext, source_dir: str = ".", layout: InstallLayout = None):
    """
    Install the driver and start it as a systemd service.

    Args:
        ctx: ExecutionContext for all host operations
        source_dir: Checkout holding target/release/asus-touchpad and the unit file
        layout: Target paths (default: the real system paths)

    Raises:
        InstallerError: the first step that failed
    """
    layout = layout or InstallLayout()
    check_privilege(ctx)
    check_systemd_available(ctx)

    binary_src, unit_src = default_sources(source_dir)

    with install_lock(ctx, layout):
        ctx.print(f"Installing {APP_NAME}...")
        ensure_module_loaded(ctx, MODULE_NAME, layout.sysfs_module_dir)
        deploy(ctx, binary_src, unit_src, layout)
        register_and_start(ctx, UNIT_NAME)

    if not ctx.dry_run:
        verify_running(ctx)

    ctx.print(f"✓ {APP_NAME} installation completed successfully!")


def verify_running(ctx: ExecutionContext) -> bool:
    """Warn when the service did not come up after install"""
    if is_active(ctx, UNIT_NAME):
        ctx.print("✓ Service is running successfully")
        return True
    ctx.print("⚠ Warning: Service may not be running properly")
    ctx.print(f"   Check service status with: sudo systemctl status {APP_NAME}")
    return False


def uninstall(ctx: ExecutionContext, layout: InstallLayout = None):
    """
    Stop and disable the service, then remove its files.

    The i2c-dev module stays loaded since other programs may use it.
    """
    layout = layout or InstallLayout()
    check_privilege(ctx)
    check_systemd_available(ctx)

    with install_lock(ctx, layout):
        ctx.print(f"Uninstalling {APP_NAME}...")
        stop_and_deregister(ctx, UNIT_NAME)
        undeploy(ctx, layout)
        reload_units(ctx)

    ctx.print(f"✓ {APP_NAME} uninstallation completed!")


def status(ctx: ExecutionContext, layout: InstallLayout = None) -> InstallStatus:
    """Query the current state without changing anything"""
    layout = layout or InstallLayout()
    return InstallStatus(
        module_loaded=is_module_loaded(ctx, MODULE_NAME, layout.sysfs_module_dir),
        binary_present=ctx.exists(layout.binary_path),
        unit_present=ctx.exists(layout.unit_path),
        enabled=is_enabled(ctx, UNIT_NAME),
        active=is_active(ctx, UNIT_NAME),
    )
