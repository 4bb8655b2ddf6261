from frontdesk.services.history.history_service import HistoryService

__all__ = ["HistoryService"]
