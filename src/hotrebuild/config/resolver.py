"""
Configuration layer merging and resolution.

Two ``RawConfig`` layers are merged field by field: the overlay (command
line) wins outright over the base (config file), and any field neither layer
sets falls back to a built-in default. The result is a frozen
``EffectiveConfig`` that every other component reads.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.config import HOOK_STAGES, EffectiveConfig, RawConfig
from ..validation import ConfigError, ValidationError, validate_positive_integer
from ..watching.filters import compile_ignore_spec, normalize_extension
from .defaults import (
    BASE_BUILD_ARGV,
    DEFAULT_CLEAR,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_IGNORE_GLOBS,
    DEFAULT_INCLUDE_EXT,
    DEFAULT_WATCH_CARGO,
    DEFAULT_WATCH_PLAIN,
    MANIFEST_FILE,
)

logger = logging.getLogger(__name__)


def merge_configs(base: Optional[RawConfig], overlay: RawConfig) -> RawConfig:
    """
    Merge two configuration layers.

    For every field, a value set in ``overlay`` replaces the ``base`` value
    entirely (lists are not merged). Fields the overlay leaves unset keep the
    base value.
    """
    if base is None:
        return dataclasses.replace(overlay)

    merged = {}
    for name in RawConfig.field_names():
        overlay_value = getattr(overlay, name)
        merged[name] = overlay_value if overlay_value is not None else getattr(base, name)
    return RawConfig(**merged)


def default_watch_roots(cwd: Optional[Path] = None) -> List[str]:
    """Cargo layout if a manifest exists in ``cwd``, otherwise the directory itself."""
    cwd = cwd or Path.cwd()
    if (cwd / MANIFEST_FILE).exists():
        return list(DEFAULT_WATCH_CARGO)
    return list(DEFAULT_WATCH_PLAIN)


def normalize_extensions(extensions: Iterable[str]) -> frozenset:
    return frozenset(normalize_extension(ext) for ext in extensions)


def synthesize_build_argv(
    release: bool = False,
    manifest_path: Optional[Path] = None,
    workspace: bool = False,
    package: Optional[str] = None,
    bin: Optional[str] = None,
    all_features: bool = False,
    no_default_features: bool = False,
    features: Sequence[str] = (),
) -> Tuple[str, ...]:
    """
    Build the ``cargo build`` argv from project-selection options.

    Flags are emitted in a fixed order: release, manifest path, workspace,
    package, bin, all-features, no-default-features, features.
    """
    argv = list(BASE_BUILD_ARGV)
    if release:
        argv.append("--release")
    if manifest_path is not None:
        argv.extend(["--manifest-path", str(manifest_path)])
    if workspace:
        argv.append("--workspace")
    if package:
        argv.extend(["-p", package])
    if bin:
        argv.extend(["--bin", bin])
    if all_features:
        argv.append("--all-features")
    if no_default_features:
        argv.append("--no-default-features")
    if features:
        argv.extend(["--features", ",".join(features)])
    return tuple(argv)


def _hook_tuple(hooks: Optional[List[List[str]]]) -> Tuple[Tuple[str, ...], ...]:
    return tuple(tuple(argv) for argv in (hooks or ()))


def resolve_config(overlay: RawConfig, base: Optional[RawConfig] = None,
                   cwd: Optional[Path] = None) -> EffectiveConfig:
    """
    Resolve the overlay and optional base layers into the effective policy.

    Args:
        overlay: Command-line layer (wins on conflicts)
        base: Config-file layer, if any
        cwd: Directory used for the default watch roots (defaults to the
            current working directory)

    Returns:
        Fully defaulted EffectiveConfig

    Raises:
        ConfigError: If an ignore glob is malformed or a value is invalid
    """
    merged = merge_configs(base, overlay)
    logger.debug(f"Fields set by overlay: {overlay.set_fields()}")
    if base is not None:
        logger.debug(f"Fields set by base: {base.set_fields()}")

    watch_entries = merged.watch if merged.watch is not None else default_watch_roots(cwd)
    watch = tuple(Path(p) for p in watch_entries)

    ignore_globs = tuple(merged.ignore if merged.ignore is not None else DEFAULT_IGNORE_GLOBS)
    ignore_spec = compile_ignore_spec(ignore_globs)

    include_ext = normalize_extensions(
        merged.include_ext if merged.include_ext is not None else DEFAULT_INCLUDE_EXT
    )
    exclude_ext = normalize_extensions(merged.exclude_ext or ())

    debounce_ms = merged.debounce_ms if merged.debounce_ms is not None else DEFAULT_DEBOUNCE_MS
    try:
        debounce_ms = validate_positive_integer(debounce_ms, min_value=0, field_name="debounce_ms",
                                                strict=True)
    except ValidationError as e:
        raise ConfigError(str(e), field_name="debounce_ms", value=debounce_ms) from e

    clear = merged.clear if merged.clear is not None else DEFAULT_CLEAR

    manifest_path = Path(merged.manifest_path) if merged.manifest_path else None
    features = tuple(merged.features or ())
    all_features = bool(merged.all_features)
    no_default_features = bool(merged.no_default_features)
    workspace = bool(merged.workspace)
    release = bool(merged.release)

    if merged.build is not None:
        build = tuple(merged.build)
    else:
        build = synthesize_build_argv(
            release=release,
            manifest_path=manifest_path,
            workspace=workspace,
            package=merged.package,
            bin=merged.bin,
            all_features=all_features,
            no_default_features=no_default_features,
            features=features,
        )

    hooks = {stage: _hook_tuple(getattr(merged, stage)) for stage in HOOK_STAGES}

    config = EffectiveConfig(
        watch=watch,
        ignore_globs=ignore_globs,
        ignore_spec=ignore_spec,
        include_ext=include_ext,
        exclude_ext=exclude_ext,
        debounce=debounce_ms / 1000.0,
        clear=clear,
        build=build,
        run=tuple(merged.run) if merged.run is not None else None,
        manifest_path=manifest_path,
        package=merged.package,
        bin=merged.bin,
        features=features,
        all_features=all_features,
        no_default_features=no_default_features,
        workspace=workspace,
        release=release,
        **hooks,
    )
    logger.info(
        f"Effective config: watch={[str(p) for p in watch]} debounce={debounce_ms}ms "
        f"build={list(build)} run={list(config.run) if config.run else '<cargo metadata>'}"
    )
    return config
