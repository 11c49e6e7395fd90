"""
Fixed installation paths for the asus-touchpad driver.

None of these are configurable at runtime. InstallLayout only exists so the
whole set can be rebased under another root directory, which the tests do.
"""

from .execution_context import path_join

APP_NAME = "asus-touchpad"
MODULE_NAME = "i2c-dev"
UNIT_NAME = f"{APP_NAME}.service"

INSTALL_DIR = "usr/share/asus-touchpad"
SERVICE_DIR = "etc/systemd/system"
SYSFS_MODULE_DIR = "sys/module"
LOCK_FILE = "run/asus-touchpad-installer.lock"

# Build outputs, relative to the source directory
BINARY_SOURCE = path_join("target", "release", APP_NAME)
UNIT_SOURCE = UNIT_NAME


class InstallLayout:
    """Absolute paths of every host resource the installer touches."""

    def __init__(self, root: str = "/"):
        self.root = root
        self.install_dir = path_join(root, INSTALL_DIR)
        self.binary_path = path_join(self.install_dir, APP_NAME)
        self.service_dir = path_join(root, SERVICE_DIR)
        self.unit_path = path_join(self.service_dir, UNIT_NAME)
        self.sysfs_module_dir = path_join(root, SYSFS_MODULE_DIR)
        self.lock_path = path_join(root, LOCK_FILE)

    def __repr__(self):
        return f"InstallLayout(root={self.root!r})"


def default_sources(source_dir: str = "."):
    """
    Locate the build outputs to deploy.

    Args:
        source_dir: Checkout containing the cargo build output and the unit file

    Returns:
        tuple: (binary source path, unit file source path)
    """
    return path_join(source_dir, BINARY_SOURCE), path_join(source_dir, UNIT_SOURCE)
