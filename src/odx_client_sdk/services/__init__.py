from .catalog import CatalogService
from .order_submitter import OrderSubmitter
from .session_manager import SessionManager

__all__ = ["CatalogService", "OrderSubmitter", "SessionManager"]
