from backend.engine.history.history import Action, History, HistoryRecord

__all__ = ["Action", "History", "HistoryRecord"]
