# Resource keys: the REST collection paths, also used as cache keys.
PROGRAMS_KEY = "/api/programs"
BLOG_KEY = "/api/blog"
CONTACTS_KEY = "/api/contact-messages"

# Write-only endpoint (never read through the cache)
DONATIONS_PATH = "/api/donations"
