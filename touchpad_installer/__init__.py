"""
asus-touchpad Installation Package

This package contains modules for installing and removing the asus-touchpad
numpad driver as a systemd service on Linux.
"""

from .errors import (
    InstallerError,
    PrivilegeError,
    ModuleError,
    FsError,
    ServiceError,
    LockError
)

from .layout import (
    APP_NAME,
    MODULE_NAME,
    UNIT_NAME,
    InstallLayout,
    default_sources
)

from .privilege import check_privilege

from .kernel_module import (
    ensure_module_loaded,
    is_module_loaded
)

from .file_deployer import (
    deploy,
    undeploy
)

from .service_registrar import (
    check_systemd_available,
    register_and_start,
    stop_and_deregister,
    reload_units,
    load_state,
    is_active,
    is_enabled
)

from .lifecycle import (
    InstallStatus,
    install,
    uninstall,
    status
)

from .execution_context import (
    ExecutionContext,
    execution_context,
    path_join
)
