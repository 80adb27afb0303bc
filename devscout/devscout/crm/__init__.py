from .folk import CrmOutcome, FolkClient

__all__ = ["CrmOutcome", "FolkClient"]
