import os
import sys

# Must be set before config.py is imported by the app module.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
