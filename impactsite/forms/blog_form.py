from datetime import datetime

from wtforms import Form, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, NumberRange, ValidationError


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def parse_iso8601(raw: str) -> datetime:
    """fromisoformat() that also accepts a trailing 'Z'."""
    s = (raw or "").strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


class BlogPostForm(Form):
    title = StringField("Title", validators=[DataRequired(message="Title is required.")], filters=[_strip])
    category = StringField("Category", validators=[DataRequired(message="Category is required.")], filters=[_strip])
    excerpt = TextAreaField("Excerpt", validators=[DataRequired(message="Excerpt is required.")], filters=[_strip])
    content = TextAreaField("Content", validators=[DataRequired(message="Content is required.")])
    read_time = IntegerField(
        "Read time (minutes)",
        validators=[
            InputRequired(message="Read time is required."),
            NumberRange(min=1, message="Read time must be at least 1 minute."),
        ],
    )
    published_at = StringField(
        "Published at",
        validators=[DataRequired(message="Publish date is required.")],
        filters=[_strip],
        render_kw={"placeholder": "2025-02-10T10:00:00Z"},
    )

    def validate_published_at(self, field):
        try:
            parse_iso8601(field.data)
        except ValueError:
            raise ValidationError("Publish date must be an ISO-8601 timestamp.")
