"""
Configuration for loose Rust files compiled without a Cargo project.

``hotrebuild main.rs util.rs`` watches the current directory, compiles the
given files with ``rustc`` into a temporary binary, and runs that binary.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from ..models.config import RawConfig
from ..system.cargo import exe_name
from ..validation import ConfigError
from .defaults import DEFAULT_IGNORE_GLOBS, FILES_MODE_COMPILER, FILES_MODE_OUTPUT_NAME

logger = logging.getLogger(__name__)


def files_mode_output_path(output_dir: Optional[Path] = None) -> Path:
    """Where the compiled binary is written."""
    directory = output_dir or Path(tempfile.gettempdir())
    return directory / exe_name(FILES_MODE_OUTPUT_NAME)


def files_mode_config(files: Sequence[Path], output_dir: Optional[Path] = None) -> RawConfig:
    """
    Build the command-line layer for files mode.

    Args:
        files: Rust source files to compile, in order
        output_dir: Directory for the compiled binary (system temp dir by default)

    Returns:
        A RawConfig that fully describes the watch/build/run policy

    Raises:
        ConfigError: If no files are given, a file is missing, or a file is
            not a ``.rs`` source
    """
    if not files:
        raise ConfigError("no files provided", field_name="files")

    for f in files:
        f = Path(f)
        if not f.exists():
            raise ConfigError(f"file does not exist: {f}", field_name="files", value=str(f))
        if f.suffix != ".rs":
            raise ConfigError(f"not a .rs file: {f}", field_name="files", value=str(f))

    output = files_mode_output_path(output_dir)
    build = [FILES_MODE_COMPILER, *(str(f) for f in files), "-o", str(output)]
    logger.info(f"Files mode: compiling {len(files)} file(s) into {output}")

    return RawConfig(
        watch=["."],
        include_ext=["rs"],
        ignore=list(DEFAULT_IGNORE_GLOBS),
        build=build,
        run=[str(output)],
        clear=True,
    )
