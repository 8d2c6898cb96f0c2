import os

TRUTHY = {"1", "true", "t", "yes", "y", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    """Read a feature switch such as ``WTF_CSRF_ENABLED`` from the environment.

    Unset means ``default``. Set to an empty or unrecognised value means off.
    """
    raw_value = os.environ.get(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in TRUTHY


def _env_list(name: str, default=()) -> list:
    """Return a lower-cased list from a comma separated environment variable."""
    raw_value = os.environ.get(name)
    if raw_value is None:
        return [item.lower() for item in default]
    return [item.strip().lower() for item in raw_value.split(",") if item.strip()]


def _get_secret_key() -> str:
    """SECRET_KEY signs sessions, CSRF tokens and bearer tokens.

    Only a development run (``FLASK_ENV=development`` or ``FLASK_DEBUG``) may
    start without one.
    """
    key = os.environ.get("SECRET_KEY")
    if key:
        return key
    if os.environ.get("FLASK_ENV") == "development" or os.environ.get("FLASK_DEBUG"):
        return "fleet-dev-secret"
    raise RuntimeError(
        "SECRET_KEY is not set. Export a long random value, for example the "
        "output of `openssl rand -hex 32`."
    )


class Config:
    SECRET_KEY = _get_secret_key()
    WTF_CSRF_ENABLED = _env_bool("WTF_CSRF_ENABLED", True)
    # CSRF is enforced by hand for cookie sessions only, see app._csrf_for_cookie_sessions
    WTF_CSRF_CHECK_DEFAULT = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "sqlite:///fleet.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Signups with one of these addresses get the admin role
    ADMIN_EMAILS = _env_list("ADMIN_EMAILS", ["admin@example.com", "demo@example.com"])
    SESSION_TIMEOUT_MINUTES = int(os.environ.get("SESSION_TIMEOUT_MINUTES", "30"))
    AUTH_TOKEN_MAX_AGE = int(os.environ.get("AUTH_TOKEN_MAX_AGE", str(7 * 24 * 3600)))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
