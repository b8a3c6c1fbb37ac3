"""
Data models for the supervisor.

Configuration Models:
- RawConfig: one partial configuration layer (file or command line)
- EffectiveConfig: the resolved, immutable policy

Runtime Models:
- ChangeEvent: a filesystem notification
- ManagedProcess: handle to the running application's process group
- PipelineStage / PipelineResult: the build-run state machine
"""

from .config import HOOK_STAGES, EffectiveConfig, RawConfig
from .runtime import ChangeEvent, ManagedProcess, PipelineResult, PipelineStage

__all__ = [
    "HOOK_STAGES",
    "EffectiveConfig",
    "RawConfig",
    "ChangeEvent",
    "ManagedProcess",
    "PipelineResult",
    "PipelineStage",
]
