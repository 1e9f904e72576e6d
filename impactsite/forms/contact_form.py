from wtforms import Form, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class ContactForm(Form):
    """Public contact form (creates a ContactMessage)."""

    name = StringField(
        "Name",
        validators=[
            DataRequired(message="Please enter your name."),
            Length(max=160, message="Name must be under 160 characters."),
        ],
        filters=[_strip],
        render_kw={"placeholder": "Full Name"},
    )
    email = StringField(
        "Email",
        validators=[
            DataRequired(message="Please enter your email."),
            Email(message="Please enter a valid email address."),
            Length(max=160, message="Email must be under 160 characters."),
        ],
        filters=[_strip],
        render_kw={"placeholder": "name@example.com"},
    )
    subject = StringField(
        "Subject",
        validators=[
            DataRequired(message="Please enter a subject."),
            Length(max=200, message="Subject must be under 200 characters."),
        ],
        filters=[_strip],
        render_kw={"placeholder": "How can we help?"},
    )
    message = TextAreaField(
        "Message",
        validators=[DataRequired(message="Please enter a message.")],
        filters=[_strip],
        render_kw={"placeholder": "Your message...", "rows": 6},
    )
