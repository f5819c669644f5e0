from backend.engine.windetector.detector import MatchStatus, WinDetector

__all__ = ["MatchStatus", "WinDetector"]
