from .blog_form import BlogPostForm, parse_iso8601
from .contact_form import ContactForm
from .donation_form import DONATION_PROGRAM_CHOICES, DONATION_PROGRAMS, DonationForm
from .program_form import ProgramForm

__all__ = [
    "BlogPostForm",
    "ContactForm",
    "DonationForm",
    "ProgramForm",
    "DONATION_PROGRAM_CHOICES",
    "DONATION_PROGRAMS",
    "parse_iso8601",
]
