from backend.engine.gameplay.game import ActionResult, TilingSession

__all__ = ["ActionResult", "TilingSession"]
