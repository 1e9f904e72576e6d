from __future__ import annotations

from typing import Any, Dict

from impactsite.extensions import db

from .blog_post import BlogPost
from .contact_message import ContactMessage
from .donation import DONATION_PROGRAMS, Donation
from .mixins import TimestampMixin
from .program import Program

# --- Register models here -------------------------------------------------------
_MODEL_MAP: Dict[str, Any] = {
    "Program": Program,
    "BlogPost": BlogPost,
    "ContactMessage": ContactMessage,
    "Donation": Donation,
}

__all__ = ["db", "TimestampMixin", "DONATION_PROGRAMS", *list(_MODEL_MAP.keys())]


def available_models() -> Dict[str, Any]:
    """Return a dict of {name: model_class}."""
    return dict(_MODEL_MAP)
