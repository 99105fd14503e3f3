"""Orchestrators for menu analysis workflows."""

from .menu_orchestrator import AnalysisStage, MenuAnalysisOrchestrator, MenuAnalysisResult

__all__ = ["AnalysisStage", "MenuAnalysisOrchestrator", "MenuAnalysisResult"]
