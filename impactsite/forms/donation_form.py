"""
Donation pledge form shown on a program page.
Records the intent only; checkout lives with the payment provider.
"""

from wtforms import DecimalField, Form, SelectField, StringField
from wtforms.validators import DataRequired, Email, Length, NumberRange

# Shared by the form, the Donation model and the API
DONATION_PROGRAM_CHOICES = [
    ("general", "Where it's needed most"),
    ("education", "Youth Development & Education"),
    ("healthcare", "Community Health"),
    ("youth", "Youth Leadership"),
    ("empowerment", "Women's Economic Empowerment"),
]
DONATION_PROGRAMS = tuple(value for value, _ in DONATION_PROGRAM_CHOICES)


class DonationForm(Form):
    program = SelectField(
        "Program",
        choices=DONATION_PROGRAM_CHOICES,
        validators=[DataRequired(message="Please select a program.")],
    )
    amount = DecimalField(
        "Amount (USD)",
        places=2,
        validators=[
            DataRequired(message="Please enter an amount."),
            NumberRange(min=5, message="Minimum donation is $5."),
        ],
        render_kw={"placeholder": "50.00"},
    )
    name = StringField(
        "Name",
        validators=[
            DataRequired(message="Please enter your name."),
            Length(max=160, message="Name must be under 160 characters."),
        ],
        filters=[lambda x: x.strip() if isinstance(x, str) else x],
        render_kw={"placeholder": "Full Name"},
    )
    email = StringField(
        "Email",
        validators=[DataRequired(message="Please enter your email."), Email()],
        filters=[lambda x: x.strip().lower() if isinstance(x, str) else x],
        render_kw={"placeholder": "name@example.com"},
    )
