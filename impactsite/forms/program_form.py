"""
Program form: the writable subset of a Program.
Used by the admin dialog and by the /api/programs contract.
"""

from urllib.parse import urlparse

from wtforms import Form, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, ValidationError


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class ProgramForm(Form):
    title = StringField(
        "Title",
        validators=[
            DataRequired(message="Title is required."),
            Length(max=200, message="Title must be under 200 characters."),
        ],
        filters=[_strip],
        render_kw={"placeholder": "Program title"},
    )
    category = StringField(
        "Category",
        validators=[
            DataRequired(message="Category is required."),
            Length(max=120, message="Category must be under 120 characters."),
        ],
        filters=[_strip],
        render_kw={"placeholder": "e.g. Education, Health"},
    )
    image = StringField(
        "Image URL",
        validators=[
            DataRequired(message="Image URL is required."),
            Length(max=500, message="Image URL must be under 500 characters."),
        ],
        filters=[_strip],
        render_kw={"placeholder": "https://..."},
    )
    description = TextAreaField(
        "Description",
        validators=[DataRequired(message="Description is required.")],
        filters=[_strip],
        render_kw={"placeholder": "Program description...", "rows": 6},
    )

    def validate_image(self, field):
        """Absolute http(s) URL or a site-relative /path."""
        raw = field.data or ""
        if raw.startswith("/") and not raw.startswith("//"):
            return
        p = urlparse(raw)
        if p.scheme in {"http", "https"} and p.netloc:
            return
        raise ValidationError("Image must be an http(s) URL or a /static path.")
