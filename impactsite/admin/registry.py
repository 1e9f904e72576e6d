"""
Admin resources: one declaration per entity managed from /admin.
The generic CrudPage and the list template read everything from here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from impactsite.resources.keys import BLOG_KEY, CONTACTS_KEY, PROGRAMS_KEY
from impactsite.schemas import PROGRAM_SCHEMA, EntitySchema


@dataclass(frozen=True)
class Column:
    field: str
    label: str
    kind: str = "text"  # text | image | clip | badge


@dataclass(frozen=True)
class AdminResource:
    name: str
    title: str
    singular: str
    list_key: str
    columns: Tuple[Column, ...]
    schema: Optional[EntitySchema] = None
    item_path: Optional[str] = None
    can_create: bool = False
    can_update: bool = False
    can_delete: bool = False
    empty_message: str = "No items yet."
    description: str = ""

    @property
    def label(self) -> str:
        return self.singular.capitalize()

    def supports(self, action: str) -> bool:
        return {
            "create": self.can_create,
            "update": self.can_update,
            "delete": self.can_delete,
        }.get(action, False)

    def path_for(self, identifier: Any) -> str:
        if self.item_path is None:
            raise ValueError(f"{self.name} has no item endpoint")
        return self.item_path.format(id=quote(str(identifier), safe=""))

    def message(self, action: str) -> str:
        """Success toast text, e.g. 'Program created successfully'."""
        return f"{self.label} {action} successfully"


RESOURCES: Dict[str, AdminResource] = {
    r.name: r
    for r in (
        AdminResource(
            name="programs",
            title="Programs",
            singular="program",
            list_key=PROGRAMS_KEY,
            item_path=PROGRAMS_KEY + "/{id}",
            schema=PROGRAM_SCHEMA,
            columns=(
                Column("image", "Image", "image"),
                Column("title", "Title"),
                Column("category", "Category", "badge"),
                Column("description", "Description", "clip"),
            ),
            can_create=True,
            can_update=True,
            can_delete=True,
            empty_message="No programs found. Create your first program to get started.",
            description="Manage community programs shown on the website.",
        ),
        AdminResource(
            name="blog",
            title="Blog Posts",
            singular="blog post",
            list_key=BLOG_KEY,
            columns=(
                Column("title", "Title"),
                Column("category", "Category", "badge"),
                Column("published_label", "Published"),
                Column("read_time", "Read time"),
            ),
            empty_message="No blog posts published yet.",
            description="Stories & insights published on the blog.",
        ),
        AdminResource(
            name="contacts",
            title="Contact Messages",
            singular="contact message",
            list_key=CONTACTS_KEY,
            columns=(
                Column("name", "Name"),
                Column("email", "Email"),
                Column("subject", "Subject"),
                Column("message", "Message", "clip"),
            ),
            empty_message="No contact messages yet.",
            description="Enquiries from the website contact form.",
        ),
    )
}


def get_resource(name: str) -> Optional[AdminResource]:
    return RESOURCES.get(name)
