"""Diagnostic tool for verifying the mdconvert installation and native renderer."""

import sys
from importlib import import_module
from pathlib import Path
from typing import Optional

try:
    from rich.console import Console
    from rich.table import Table

    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False
    Console = None  # type: ignore
    Table = None  # type: ignore

from .conversion.native import NativeLibraryLoader
from .errors import ComponentUnavailable, NativeConversionError
from .models.config import ConversionConfig


def check_dependency(
    module_name: str, package_name: Optional[str] = None, optional: bool = False
) -> tuple[bool, str]:
    """
    Check if a Python module is importable.

    Args:
        module_name: Name of the module to import
        package_name: Display name of the package (defaults to module_name)
        optional: Whether this is an optional dependency

    Returns:
        Tuple of (success: bool, message: str)
    """
    display_name = package_name or module_name

    try:
        import_module(module_name)
        return True, f"[OK] {display_name}"
    except ImportError:
        if optional:
            return False, f"[WARN] {display_name} (optional - not installed)"
        else:
            return False, f"[MISSING] {display_name}"


def check_native_library(library_path: Path) -> tuple[bool, str]:
    """
    Check that the native renderer library exists and loads.

    A missing library is only a warning: conversions fall back to the
    rule-based renderer.

    Returns:
        Tuple of (success: bool, message: str)
    """
    try:
        NativeLibraryLoader(library_path).load()
        return True, f"[OK] Native renderer ({library_path})"
    except ComponentUnavailable:
        return False, f"[WARN] Native renderer not installed - optional ({library_path})"
    except NativeConversionError as e:
        return False, f"[FAIL] Native renderer failed to load - {e.cause or e}"


def run_doctor(config: Optional[ConversionConfig] = None, use_rich: bool = True) -> int:
    """
    Run diagnostic checks and display results.

    Args:
        config: Settings naming the native library (environment config if None)
        use_rich: Whether to use rich formatting (if available)

    Returns:
        Exit code (0 if all core dependencies OK, 1 if any core dependency missing)
    """
    use_rich = use_rich and RICH_AVAILABLE
    config = config or ConversionConfig.from_env()

    print("Running mdconvert diagnostics...\n")

    core_checks = [
        ("bs4", "beautifulsoup4"),
        ("markdownify", "markdownify"),
        ("pydantic", "pydantic"),
        ("rich", "rich"),
    ]

    optional_checks = [
        ("yaml", "pyyaml", True),
    ]

    core_results = [check_dependency(mod, pkg) for mod, pkg in core_checks]
    optional_results = [check_dependency(mod, pkg, opt) for mod, pkg, opt in optional_checks]
    native_results = [check_native_library(config.resolved_library_path)]

    all_checks = {
        "Core Dependencies": core_results,
        "Optional Dependencies": optional_results,
        "Native Renderer": native_results,
    }

    if use_rich:
        console = Console()

        for category, results in all_checks.items():
            table = Table(title=category, show_header=False, box=None)
            table.add_column("Status", style="bold")

            for success, message in results:
                style = "green" if success else ("yellow" if "optional" in message else "red")
                table.add_row(message, style=style)

            console.print(table)
            console.print()
    else:
        for category, results in all_checks.items():
            print(f"{category}:")
            for _success, message in results:
                print(f"  {message}")
            print()

    core_failed = any(not success for success, _ in core_results)

    if core_failed:
        print("\nWARNING: Some core dependencies are missing!")
        print("\nRecommended fixes:")
        print("  1. For pip users: pip install --upgrade --force-reinstall mdconvert")
        print("  2. For development: pip install -e .[dev]")
        return 1

    print("\nAll core dependencies installed correctly!")
    if not config.use_native_renderer:
        print("\nNative renderer is disabled (set MDCONVERT_USE_NATIVE=true to enable).")
    return 0


if __name__ == "__main__":
    sys.exit(run_doctor())
