"""
Kernel module activation.

The driver talks to the touchpad through /dev/i2c-*, which only exists once
the i2c-dev module is loaded. Modules are never unloaded by the installer.
"""

from .errors import ModuleError
from .execution_context import ExecutionContext, SubprocessError, path_join


def is_module_loaded(ctx: ExecutionContext, name: str, sysfs_module_dir: str) -> bool:
    """Check /sys/module, which lists loadable and built-in modules alike"""
    return ctx.exists(path_join(sysfs_module_dir, name.replace('-', '_')))


def ensure_module_loaded(ctx: ExecutionContext, name: str, sysfs_module_dir: str):
    """
    Load a kernel module with modprobe unless it is already present.

    Args:
        ctx: ExecutionContext for system operations
        name: Module name as given to modprobe
        sysfs_module_dir: Directory listing the loaded modules

    Raises:
        ModuleError: modprobe is missing or failed
    """
    ctx.print(f"Loading kernel module {name}...")

    if is_module_loaded(ctx, name, sysfs_module_dir):
        ctx.print(f"✓ Kernel module {name} already loaded")
        return

    try:
        result = ctx.run(['modprobe', name], capture_output=True, text=True)
    except (SubprocessError, OSError) as e:
        raise ModuleError(f"Could not run modprobe {name}: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise ModuleError(f"modprobe {name} failed with exit code {result.returncode}: {stderr}")

    ctx.print(f"✓ Kernel module {name} loaded")
