from .api import api_bp
from .main import main_bp

__all__ = ["api_bp", "main_bp"]
