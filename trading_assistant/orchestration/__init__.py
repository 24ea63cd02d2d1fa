"""
Recompute orchestration: Idle/Live state machine over the active selection.
"""
from .orchestrator import OrchestratorState, RecomputeOrchestrator

__all__ = ["OrchestratorState", "RecomputeOrchestrator"]
