from backend.engine.gamestate.state import SessionContext

__all__ = ["SessionContext"]
