"""
Orchestrator Module
Modular, single-responsibility build orchestration components
"""

from src.orchestrator.batch_orchestrator import BuildOrchestrator

__all__ = ["BuildOrchestrator"]
