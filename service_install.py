#! /usr/bin/env python3
"""
asus-touchpad service installer.

    sudo asus-touchpad-install      # load i2c-dev, deploy, enable and start
    sudo asus-touchpad-uninstall    # stop, disable, remove
    asus-touchpad-setup status      # read-only report
"""

import click

from touchpad_installer import (
    APP_NAME,
    InstallerError,
    InstallLayout,
    execution_context,
)
from touchpad_installer import lifecycle


def _run_step(ctx, action, *args):
    """Run a pipeline and turn its errors into exit codes"""
    try:
        action(ctx, *args)
    except InstallerError as e:
        ctx.print(f"✗ {e}")
        ctx.system_exit(e.exit_code)
    except KeyboardInterrupt:
        ctx.print("\n\nInterrupted by user")
        ctx.system_exit(1)

    if ctx.dry_run:
        print("\n🔍 DRY RUN completed - no actual changes were made")
        print("   Run without --dry-run to apply them")


@click.command()
@click.option('--source-dir', default='.', show_default=True,
              type=click.Path(file_okay=False),
              help='Checkout holding target/release/asus-touchpad and asus-touchpad.service')
@click.option('--dry-run', is_flag=True, help='Show what would be done without making any changes')
def install(source_dir, dry_run):
    """Install the asus-touchpad driver and start its service."""
    with execution_context(dry_run=dry_run) as ctx:
        if dry_run:
            print("🔍 Running in DRY RUN mode - no changes will be made\n")
        _run_step(ctx, lifecycle.install, source_dir, InstallLayout())


@click.command()
@click.option('--dry-run', is_flag=True, help='Show what would be removed without actually doing it')
def uninstall(dry_run):
    """Stop the asus-touchpad service and remove its files."""
    with execution_context(dry_run=dry_run) as ctx:
        if dry_run:
            print("🔍 Running in DRY RUN mode - no changes will be made\n")
        _run_step(ctx, lifecycle.uninstall, InstallLayout())


@click.command()
def status():
    """Show whether the driver is installed and running."""
    with execution_context() as ctx:
        state = lifecycle.status(ctx, InstallLayout())
        labels = {
            'module_loaded': 'Kernel module i2c-dev loaded',
            'binary_present': 'Driver binary installed',
            'unit_present': 'Service file installed',
            'enabled': 'Service enabled',
            'active': 'Service running',
        }
        for key, value in state.as_dict().items():
            ctx.print(f"{'✓' if value else '✗'} {labels[key]}")

        if state.installed:
            ctx.print(f"\n{APP_NAME} is installed and running")
        elif state.removed:
            ctx.print(f"\n{APP_NAME} is not installed")
        else:
            ctx.print(f"\n⚠ {APP_NAME} is partially installed - re-run install or uninstall")


@click.group()
def cli():
    """Install or remove the asus-touchpad numpad driver service."""


cli.add_command(install)
cli.add_command(uninstall)
cli.add_command(status)


if __name__ == "__main__":
    cli()
