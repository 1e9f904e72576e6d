"""
Entity types and validation schemas shared by the admin forms, the public
forms and the bundled REST API.

Entities are frozen dataclasses parsed from the JSON wire format (camelCase).
Each EntitySchema wraps a plain WTForms form so the same rules run for an
HTML POST, a JSON body or a seed record, with no request context needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union

from werkzeug.datastructures import MultiDict
from wtforms import Form

from impactsite.forms import BlogPostForm, ContactForm, DonationForm, ProgramForm, parse_iso8601
from impactsite.resources.keys import BLOG_KEY, CONTACTS_KEY, PROGRAMS_KEY

log = logging.getLogger(__name__)

Identifier = Union[int, str]

_MISSING = object()


# ─────────────────────────────────────────────────────────────
# Wire helpers
# ─────────────────────────────────────────────────────────────
def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    return str(value)


def _identifier(value: Any) -> Identifier:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"invalid identifier: {value!r}")
    return value


def same_id(a: Identifier, b: Identifier) -> bool:
    """Ids arrive as ints from JSON and as strings from URLs."""
    return str(a) == str(b)


# ─────────────────────────────────────────────────────────────
# Entities
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Program:
    id: str
    title: str
    category: str
    description: str
    image: str
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Program":
        return cls(
            id=str(_identifier(payload["id"])),
            title=str(payload["title"]),
            category=str(payload["category"]),
            description=str(payload["description"]),
            image=str(payload["image"]),
            created_at=_optional_str(payload, "createdAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class BlogPost:
    id: Identifier
    title: str
    category: str
    excerpt: str
    content: str
    read_time: int
    published_at: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BlogPost":
        read_time = int(payload["readTime"])
        if read_time < 1:
            raise ValueError("readTime must be positive")
        return cls(
            id=_identifier(payload["id"]),
            title=str(payload["title"]),
            category=str(payload["category"]),
            excerpt=str(payload["excerpt"]),
            content=str(payload["content"]),
            read_time=read_time,
            published_at=str(payload["publishedAt"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "excerpt": self.excerpt,
            "content": self.content,
            "readTime": self.read_time,
            "publishedAt": self.published_at,
        }

    @property
    def paragraphs(self) -> List[str]:
        return [p.strip() for p in self.content.split("\n\n") if p.strip()]

    @property
    def published_on(self) -> Optional[datetime]:
        try:
            return parse_iso8601(self.published_at)
        except ValueError:
            return None

    @property
    def published_label(self) -> str:
        dt = self.published_on
        if dt is None:
            return self.published_at
        return dt.strftime("%B %d, %Y").replace(" 0", " ")


@dataclass(frozen=True)
class ContactMessage:
    id: Identifier
    name: str
    email: str
    subject: str
    message: str
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ContactMessage":
        return cls(
            id=_identifier(payload["id"]),
            name=str(payload["name"]),
            email=str(payload["email"]),
            subject=str(payload["subject"]),
            message=str(payload["message"]),
            created_at=_optional_str(payload, "createdAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class DonationIntent:
    program: str
    amount: float
    name: str
    email: str
    id: Optional[Identifier] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DonationIntent":
        raw_id = payload.get("id")
        return cls(
            program=str(payload["program"]),
            amount=float(payload["amount"]),
            name=str(payload["name"]),
            email=str(payload["email"]),
            id=None if raw_id is None else _identifier(raw_id),
        )


def unique_by_id(items: Iterable[Any]) -> Tuple[Any, ...]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    out = []
    for item in items:
        key = str(item.id)
        if key in seen:
            log.warning("Duplicate id %r dropped from %s list", item.id, type(item).__name__)
            continue
        seen.add(key)
        out.append(item)
    return tuple(out)


def find_by_id(items: Iterable[Any], identifier: Identifier) -> Optional[Any]:
    for item in items:
        if same_id(item.id, identifier):
            return item
    return None


# ─────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    value: Dict[str, Any] = field(default_factory=dict)
    field_errors: Dict[str, List[str]] = field(default_factory=dict)

    def summary(self) -> str:
        """First message per failing field, for one-line API errors."""
        return "; ".join(msgs[0] for msgs in self.field_errors.values() if msgs)


_TYPE_NAMES = {str: "text", int: "a whole number", float: "a number", Decimal: "a number"}


class EntitySchema:
    """
    Writable field set of one entity plus its validation rules.

    `field_types` lists the accepted Python types per field (JSON bodies are
    type-checked before the WTForms rules run); `aliases` maps form field
    names to their camelCase wire names.
    """

    def __init__(
        self,
        name: str,
        form_class: Type[Form],
        field_types: Dict[str, Tuple[type, ...]],
        *,
        aliases: Optional[Dict[str, str]] = None,
        normalizers: Optional[Dict[str, Callable[[Any], Any]]] = None,
    ):
        self.name = name
        self.form_class = form_class
        self.field_types = dict(field_types)
        self.aliases = dict(aliases or {})
        self.normalizers = dict(normalizers or {})

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self.field_types)

    def wire_name(self, name: str) -> str:
        return self.aliases.get(name, name)

    def label(self, name: str) -> str:
        return str(self.form_class()[name].label.text)

    def _lookup(self, data: Mapping[str, Any], name: str) -> Any:
        if name in data:
            return data[name]
        alias = self.aliases.get(name)
        if alias is not None and alias in data:
            return data[alias]
        return _MISSING

    def validate(self, data: Any, partial: bool = False) -> ValidationResult:
        """
        Validate `data` (a dict, JSON object or request.form).

        With partial=True only the fields present are checked and returned,
        which is what a PATCH body needs. Unknown keys are ignored.
        """
        if not isinstance(data, Mapping):
            return ValidationResult(False, {}, {"_form": ["Expected an object of fields."]})

        present: Dict[str, str] = {}
        type_errors: Dict[str, List[str]] = {}
        for name in self.fields:
            raw = self._lookup(data, name)
            if raw is _MISSING:
                continue
            if raw is None:
                present[name] = ""
                continue
            accepted = self.field_types[name]
            if isinstance(raw, bool) or not isinstance(raw, accepted):
                wanted = _TYPE_NAMES.get(accepted[0], accepted[0].__name__)
                type_errors[name] = [f"{self.label(name)} must be {wanted}."]
                continue
            present[name] = str(raw)

        form = self.form_class(formdata=MultiDict(present))
        form.validate()

        errors: Dict[str, List[str]] = {}
        for name in self.fields:
            if name in type_errors:
                errors[name] = type_errors[name]
            elif partial and name not in present:
                continue
            elif form[name].errors:
                errors[name] = [str(m) for m in form[name].errors]

        if errors:
            return ValidationResult(False, {}, errors)

        names = [n for n in self.fields if n in present] if partial else list(self.fields)
        value = {n: self._normalize(n, form[n].data) for n in names}
        return ValidationResult(True, value, {})

    def _normalize(self, name: str, value: Any) -> Any:
        fn = self.normalizers.get(name)
        return fn(value) if fn is not None else value

    def to_wire(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return {self.wire_name(k): v for k, v in value.items()}

    def blank(self) -> Dict[str, Any]:
        return {name: "" for name in self.fields}

    def initial_from(self, entity: Any) -> Dict[str, Any]:
        return {name: getattr(entity, name) for name in self.fields}

    def form(self, values: Optional[Mapping[str, Any]] = None) -> Form:
        """Form pre-filled with `values` as raw input, for rendering (not validated)."""
        raw = {k: "" if v is None else str(v) for k, v in (values or {}).items() if k in self.field_types}
        return self.form_class(formdata=MultiDict(raw))


def _money(value: Any) -> float:
    return float(Decimal(value).quantize(Decimal("0.01")))


_TEXT = (str,)

PROGRAM_SCHEMA = EntitySchema(
    "program",
    ProgramForm,
    {"title": _TEXT, "category": _TEXT, "image": _TEXT, "description": _TEXT},
)

CONTACT_SCHEMA = EntitySchema(
    "contact message",
    ContactForm,
    {"name": _TEXT, "email": _TEXT, "subject": _TEXT, "message": _TEXT},
)

BLOG_POST_SCHEMA = EntitySchema(
    "blog post",
    BlogPostForm,
    {
        "title": _TEXT,
        "category": _TEXT,
        "excerpt": _TEXT,
        "content": _TEXT,
        "read_time": (int, str),
        "published_at": _TEXT,
    },
    aliases={"read_time": "readTime", "published_at": "publishedAt"},
)

DONATION_SCHEMA = EntitySchema(
    "donation",
    DonationForm,
    {
        "program": _TEXT,
        "amount": (int, float, Decimal, str),
        "name": _TEXT,
        "email": _TEXT,
    },
    normalizers={"amount": _money},
)

# Cache key -> payload item parser, handed to the ResourceClient
ENTITY_PARSERS: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
    PROGRAMS_KEY: Program.from_dict,
    BLOG_KEY: BlogPost.from_dict,
    CONTACTS_KEY: ContactMessage.from_dict,
}
