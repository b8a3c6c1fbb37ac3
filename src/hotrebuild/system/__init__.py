"""
System interaction utilities.

This module provides the supervisor's contact points with the operating
system and toolchain:

- Command execution, captured or with inherited streams
- Cargo output-binary discovery via ``cargo metadata``
- Terminal clearing before a restart
"""

from .cargo import (
    build_default_run_argv,
    exe_name,
    exe_path,
    query_target_directory,
    resolve_bin_name,
)
from .commands import format_argv, run_command, run_inherited
from .terminal import clear_terminal

__all__ = [
    # Cargo
    "build_default_run_argv",
    "exe_name",
    "exe_path",
    "query_target_directory",
    "resolve_bin_name",
    # Commands
    "format_argv",
    "run_command",
    "run_inherited",
    # Terminal
    "clear_terminal",
]
