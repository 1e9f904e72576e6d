from .crud import CrudPage, PageState, TransitionError
from .dashboard import Dashboard
from .registry import RESOURCES, AdminResource
from .routes import admin as admin_bp
from .store import PageStore, init_page_store

__all__ = [
    "RESOURCES",
    "AdminResource",
    "CrudPage",
    "Dashboard",
    "PageState",
    "PageStore",
    "TransitionError",
    "admin_bp",
    "init_page_store",
]
