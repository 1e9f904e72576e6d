import os

# Production unless the environment says otherwise
os.environ.setdefault("ENV", "production")

from impactsite import create_app  # noqa: E402

app = create_app()
