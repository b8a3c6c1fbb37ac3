"""
Cargo integration: output-binary discovery.

When no explicit run command is configured, the binary to run is located
under Cargo's target directory, as reported by ``cargo metadata``:
``<target_directory>/<release|debug>/<bin>[.exe]``.
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..validation import ResolutionError
from .commands import format_argv, run_command

logger = logging.getLogger(__name__)

WINDOWS_EXE_SUFFIX = ".exe"


def exe_name(bin_name: str, platform: Optional[str] = None) -> str:
    """Platform-specific executable file name for a Cargo binary target."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return f"{bin_name}{WINDOWS_EXE_SUFFIX}"
    return bin_name


def exe_path(target_dir: Path, release: bool, bin_name: str) -> Path:
    profile = "release" if release else "debug"
    return Path(target_dir) / profile / exe_name(bin_name)


def metadata_argv(manifest_path: Optional[Path] = None) -> List[str]:
    argv = ["cargo", "metadata", "--format-version", "1", "--no-deps"]
    if manifest_path is not None:
        argv.extend(["--manifest-path", str(manifest_path)])
    return argv


def query_target_directory(manifest_path: Optional[Path] = None) -> Path:
    """
    Ask Cargo where build output goes.

    Args:
        manifest_path: Cargo.toml to query; the current project if None

    Returns:
        The workspace target directory

    Raises:
        ResolutionError: If cargo fails or its output has no target directory
    """
    argv = metadata_argv(manifest_path)
    returncode, stdout, stderr = run_command(argv)
    if returncode != 0:
        raise ResolutionError(
            f"'{format_argv(argv)}' failed with exit code {returncode}: {stderr.strip()}",
            context="cargo metadata",
        )

    try:
        metadata = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ResolutionError(f"cargo metadata returned invalid JSON: {e}",
                              context="cargo metadata") from e

    target_directory = metadata.get("target_directory") if isinstance(metadata, dict) else None
    if not target_directory:
        raise ResolutionError("cargo metadata output has no target_directory",
                              context="cargo metadata")
    logger.debug(f"Cargo target directory: {target_directory}")
    return Path(target_directory)


def resolve_bin_name(config, cwd: Optional[Path] = None) -> str:
    """
    Pick the binary name: configured bin, else package, else the directory name.

    Raises:
        ResolutionError: If none is available
    """
    if config.bin:
        return config.bin
    if config.package:
        return config.package

    name = (cwd or Path.cwd()).name
    if not name:
        raise ResolutionError("cannot infer bin name; specify --bin or config bin",
                              context="bin name")
    return name


def build_default_run_argv(config, cwd: Optional[Path] = None) -> List[str]:
    """Run argv for the freshly built Cargo binary."""
    target_dir = query_target_directory(config.manifest_path)
    bin_name = resolve_bin_name(config, cwd)
    return [str(exe_path(target_dir, config.release, bin_name))]
