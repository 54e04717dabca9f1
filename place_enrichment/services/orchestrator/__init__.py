"""Search orchestration: selected provider first, the other as fallback."""

from .service import SearchOrchestrator, create_orchestrator, rank_results

__all__ = ["SearchOrchestrator", "create_orchestrator", "rank_results"]
