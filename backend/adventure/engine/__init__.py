"""Adventure engine: session storage, cue extraction and scene orchestration.

Import directly from submodules to avoid circular imports:
    from adventure.engine.cues import apply_narrative
    from adventure.engine.store import InMemorySessionStore
    from adventure.engine.orchestrator import SceneOrchestrator
"""
