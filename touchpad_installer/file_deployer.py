"""
File deployment for the driver binary and its systemd unit.

Installs overwrite whatever is already in place. The binary is swapped in with
a rename, since the running driver keeps its executable busy (ETXTBSY).
Uninstalls treat a missing file as already removed.
"""

from .errors import FsError
from .execution_context import ExecutionContext, path_join
from .layout import APP_NAME, UNIT_NAME, InstallLayout


def deploy(ctx: ExecutionContext, binary_src, unit_src, layout: InstallLayout):
    """
    Copy the driver binary and the unit file to their system locations.

    Args:
        ctx: ExecutionContext for file operations
        binary_src: Compiled driver binary to install
        unit_src: Service unit definition to install
        layout: Target paths

    Raises:
        FsError: a source is missing or a copy failed
    """
    for description, source in (("Driver binary", binary_src), ("Service unit", unit_src)):
        if not ctx.exists(source):
            raise FsError(f"{description} not found: {source}")

    try:
        ctx.makedirs(layout.install_dir, exist_ok=True)
        ctx.print(f"✓ Install directory ready: {layout.install_dir}")

        staged = path_join(layout.install_dir, f".{APP_NAME}.new")
        ctx.copy2(binary_src, staged)
        ctx.chmod(staged, 0o755)
        ctx.replace(staged, layout.binary_path)
        ctx.print(f"✓ Driver installed: {layout.binary_path}")

        ctx.copy2(unit_src, layout.unit_path)
        ctx.chmod(layout.unit_path, 0o644)
        ctx.print(f"✓ Service file installed: {layout.unit_path}")
    except OSError as e:
        raise FsError(f"Failed to deploy files: {e}") from e


def remove_file(ctx: ExecutionContext, path, description: str):
    """Remove a deployed file, succeeding if it is already gone"""
    if not ctx.exists(path):
        ctx.print(f"✓ {description} does not exist: {path}")
        return

    try:
        ctx.remove(path)
    except FileNotFoundError:
        ctx.print(f"✓ {description} does not exist: {path}")
        return
    except OSError as e:
        raise FsError(f"Failed to remove {description.lower()} {path}: {e}") from e
    ctx.print(f"✓ Removed {description.lower()}: {path}")


def undeploy(ctx: ExecutionContext, layout: InstallLayout):
    """Remove the driver binary, then the unit file and any links left to it"""
    remove_file(ctx, layout.binary_path, "Driver binary")
    remove_file(ctx, layout.unit_path, "Service file")
    remove_wants_links(ctx, layout)


def remove_wants_links(ctx: ExecutionContext, layout: InstallLayout):
    """Drop *.wants/ symlinks that outlived the unit file"""
    for link in ctx.glob(path_join(layout.service_dir, "*.wants", UNIT_NAME)):
        try:
            ctx.remove(link)
        except FileNotFoundError:
            continue
        except OSError as e:
            raise FsError(f"Failed to remove stale link {link}: {e}") from e
        ctx.print(f"✓ Removed stale link: {link}")
