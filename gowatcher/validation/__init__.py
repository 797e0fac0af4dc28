from .history_checks import HistoryError, validate_history, validate_position

__all__ = ["HistoryError", "validate_history", "validate_position"]
