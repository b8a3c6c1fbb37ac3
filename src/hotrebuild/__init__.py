"""
hotrebuild: rebuild and restart a Cargo project on every source change.

The supervisor watches the project's sources, runs the build, and replaces
the running binary with the freshly built one, running configurable hook
commands at fixed points of the pipeline.

The package is organized into specialized modules:
- config: Configuration layers, defaults, and resolution
- models: Data structures and type definitions
- validation: Input validation and the error taxonomy
- system: Command execution, Cargo integration, terminal helpers
- watching: Filesystem watching, relevance filtering, and debouncing
- orchestration: Hooks, process groups, and the pipeline supervisor
- cli: Command-line interface

Usage:
    From command line:
        hotrebuild [options]
        hotrebuild main.rs          # files mode, no Cargo project needed

    Programmatically:
        from hotrebuild import RawConfig, resolve_config, BuildRunSupervisor
        config = resolve_config(RawConfig(bin="server"))
        BuildRunSupervisor(config).run_pipeline()
"""

from .config import load_config_file, merge_configs, resolve_config
from .models import EffectiveConfig, RawConfig, PipelineStage
from .orchestration import BuildRunSupervisor, ProcessGroupManager, run_hooks
from .watching import EventGate, FileWatcher, PathFilter, is_relevant_path
from .validation import (
    BuildFailure,
    ConfigError,
    HookError,
    HookStageFailure,
    ResolutionError,
    SpawnError,
    SupervisorError,
    WatchChannelError,
)
from .cli import main_cli

__version__ = "0.3.0"

__all__ = [
    # Configuration
    "load_config_file",
    "merge_configs",
    "resolve_config",
    "EffectiveConfig",
    "RawConfig",
    # Pipeline
    "PipelineStage",
    "BuildRunSupervisor",
    "ProcessGroupManager",
    "run_hooks",
    # Watching
    "EventGate",
    "FileWatcher",
    "PathFilter",
    "is_relevant_path",
    # Errors
    "BuildFailure",
    "ConfigError",
    "HookError",
    "HookStageFailure",
    "ResolutionError",
    "SpawnError",
    "SupervisorError",
    "WatchChannelError",
    # CLI
    "main_cli",
]
