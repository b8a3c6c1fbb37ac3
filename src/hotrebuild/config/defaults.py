"""
Built-in defaults and Cargo project layout names.

These values apply when neither the config file nor the command line sets a
field.
"""

from typing import Tuple

# --- Cargo project layout ---
MANIFEST_FILE = "Cargo.toml"
LOCK_FILE = "Cargo.lock"
SOURCES_DIR = "src"

# Files that always trigger a rebuild, whatever the extension filters say.
ALWAYS_RELEVANT_FILENAMES: Tuple[str, ...] = (MANIFEST_FILE, LOCK_FILE)

# --- Config file ---
DEFAULT_CONFIG_FILENAME = ".hotrebuild.toml"

# --- Watching ---
DEFAULT_WATCH_CARGO: Tuple[str, ...] = (SOURCES_DIR, MANIFEST_FILE, LOCK_FILE)
DEFAULT_WATCH_PLAIN: Tuple[str, ...] = (".",)
DEFAULT_IGNORE_GLOBS: Tuple[str, ...] = ("**/target/**", "**/.git/**")
DEFAULT_INCLUDE_EXT: Tuple[str, ...] = ("rs", "toml")
DEFAULT_DEBOUNCE_MS = 250
DEFAULT_CLEAR = True

# --- Build ---
BASE_BUILD_ARGV: Tuple[str, ...] = ("cargo", "build")
FILES_MODE_COMPILER = "rustc"
FILES_MODE_OUTPUT_NAME = "hotrebuild-out"

# --- Process supervision ---
# Inherited by every managed process; its presence means "already supervised".
SUPERVISED_ENV_VAR = "HOTREBUILD_ACTIVE"
