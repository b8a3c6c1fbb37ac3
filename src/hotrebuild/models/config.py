"""
Configuration data models.

This module contains the two configuration shapes used by the supervisor:
a partial, layer-level ``RawConfig`` (one per source, file or command line)
and the fully resolved ``EffectiveConfig`` consumed by every other component.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Tuple

# Hook stage names, in pipeline order. ``on_build_fail`` only runs when the
# build step fails.
HOOK_STAGES: Tuple[str, ...] = (
    "pre_build",
    "post_build",
    "pre_run",
    "post_run",
    "on_build_fail",
)

Argv = Tuple[str, ...]
HookList = Tuple[Argv, ...]


@dataclass
class RawConfig:
    """
    One layer of configuration, loaded from `.hotrebuild.toml` or built from CLI flags.

    Every field is optional; ``None`` means "this layer does not set it".
    """

    # --- Watching ---
    watch: Optional[List[str]] = None
    ignore: Optional[List[str]] = None
    include_ext: Optional[List[str]] = None
    exclude_ext: Optional[List[str]] = None
    debounce_ms: Optional[int] = None
    clear: Optional[bool] = None

    # Explicit build argv; if omitted it is derived from the cargo options.
    build: Optional[List[str]] = None
    # Explicit run argv; if omitted the built binary is located via cargo metadata.
    run: Optional[List[str]] = None

    # --- Cargo selection ---
    manifest_path: Optional[str] = None
    package: Optional[str] = None
    bin: Optional[str] = None
    features: Optional[List[str]] = None
    all_features: Optional[bool] = None
    no_default_features: Optional[bool] = None
    workspace: Optional[bool] = None
    release: Optional[bool] = None

    # --- Hooks: each entry is one argv ---
    pre_build: Optional[List[List[str]]] = None
    post_build: Optional[List[List[str]]] = None
    pre_run: Optional[List[List[str]]] = None
    post_run: Optional[List[List[str]]] = None
    on_build_fail: Optional[List[List[str]]] = None

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def set_fields(self) -> List[str]:
        """Names of the fields this layer actually sets."""
        return [name for name in self.field_names() if getattr(self, name) is not None]


@dataclass(frozen=True)
class EffectiveConfig:
    """
    The fully resolved policy, derived once at startup and never mutated.

    Only ``run`` may be ``None``, in which case the binary to run is discovered
    after each successful build.
    """

    watch: Tuple[Path, ...]
    ignore_globs: Tuple[str, ...]
    # Compiled form of ignore_globs (a pathspec.PathSpec).
    ignore_spec: Any = field(compare=False, repr=False)

    include_ext: FrozenSet[str] = frozenset()
    exclude_ext: FrozenSet[str] = frozenset()

    # Debounce window in seconds.
    debounce: float = 0.25
    clear: bool = True

    build: Argv = ()
    run: Optional[Argv] = None

    manifest_path: Optional[Path] = None
    package: Optional[str] = None
    bin: Optional[str] = None
    features: Tuple[str, ...] = ()
    all_features: bool = False
    no_default_features: bool = False
    workspace: bool = False
    release: bool = False

    pre_build: HookList = ()
    post_build: HookList = ()
    pre_run: HookList = ()
    post_run: HookList = ()
    on_build_fail: HookList = ()

    @property
    def debounce_ms(self) -> int:
        return int(round(self.debounce * 1000))

    def hooks_for(self, stage: str) -> HookList:
        """Return the hook list configured for a stage name (e.g. ``"pre_run"``)."""
        if stage not in HOOK_STAGES:
            raise KeyError(f"Unknown hook stage: {stage}")
        return getattr(self, stage)
