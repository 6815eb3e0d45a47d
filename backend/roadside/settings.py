import os
import sys
from pathlib import Path
from datetime import timedelta
from dotenv import load_dotenv
from django.core.exceptions import ImproperlyConfigured

# === BASE DIR ===
BASE_DIR = Path(__file__).resolve().parent.parent
# Variables from backend/.env (skipped when the environment is already prepared)
if os.getenv("DJANGO_SKIP_DOTENV", "").strip().lower() not in ("1", "true", "yes", "y", "on"):
    load_dotenv(BASE_DIR / ".env")


# === HELPERS ===
def _bool(value, default=False):
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _csv(value):
    return [item.strip() for item in (value or "").split(",") if item.strip()]


RUNNING_TESTS = (
    _bool(os.getenv("DJANGO_TESTING"))
    or (len(sys.argv) > 1 and sys.argv[1] == "test")
    or "pytest" in sys.modules
)


# === CORE ===
DEV_SECRET_KEY = "dev-secret-key-change-me"
SECRET_KEY = (
    os.getenv("DJANGO_SECRET_KEY")
    or os.getenv("SECRET_KEY")
    or DEV_SECRET_KEY
)

# Production by default; DEBUG has to be asked for explicitly.
DEBUG = _bool(os.getenv("DJANGO_DEBUG") or os.getenv("DEBUG"), False)

# Production guards are relaxed for the test suite unless DJANGO_ENV says otherwise.
STRICT_CONFIG = not DEBUG and (
    not RUNNING_TESTS or os.getenv("DJANGO_ENV", "").strip().lower() == "production"
)

_hosts_env = os.getenv("DJANGO_ALLOWED_HOSTS") or os.getenv(
    "ALLOWED_HOSTS", "localhost,127.0.0.1"
)
ALLOWED_HOSTS = ["*"] if "*" in _hosts_env else _csv(_hosts_env)

if STRICT_CONFIG and SECRET_KEY == DEV_SECRET_KEY:
    raise ImproperlyConfigured("DJANGO_SECRET_KEY is required when DEBUG=False.")


# === INSTALLED APPS ===
INSTALLED_APPS = [
    # Django apps
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third party
    "rest_framework",
    "rest_framework_simplejwt",
    "corsheaders",

    # Local apps
    "common",
    "customers",
    "policies",
    "payments",
    "storefront",
    "core",
]

# === MIDDLEWARE ===
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",  # before CommonMiddleware
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]


# === CORS / CSRF ===
_frontend_env = os.getenv("FRONTEND_ORIGINS") or os.getenv(
    "FRONTEND_ORIGIN", "http://localhost:5173,http://127.0.0.1:5173"
)
CORS_ALLOWED_ORIGINS = _csv(_frontend_env)
# The wizard lives in the session cookie, so the storefront needs credentials.
CORS_ALLOW_CREDENTIALS = _bool(os.getenv("CORS_ALLOW_CREDENTIALS"), True)
CORS_ALLOW_ALL_ORIGINS = False

CSRF_TRUSTED_ORIGINS = [
    o for o in CORS_ALLOWED_ORIGINS if o.startswith(("http://", "https://"))
]


# === URLS / WSGI ===
ROOT_URLCONF = "roadside.urls"

ADMIN_URL = os.getenv("ADMIN_URL", "django-admin/")

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "roadside.wsgi.application"


# === DATABASE ===
if os.getenv("DB_ENGINE"):
    DATABASES = {
        "default": {
            "ENGINE": os.getenv("DB_ENGINE"),
            "NAME": os.getenv("DB_NAME"),
            "USER": os.getenv("DB_USER"),
            "PASSWORD": os.getenv("DB_PASSWORD"),
            "HOST": os.getenv("DB_HOST"),
            "PORT": os.getenv("DB_PORT"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }


# === SESSIONS (storefront wizard) ===
SESSION_COOKIE_AGE = int(os.getenv("WIZARD_SESSION_SECONDS", str(60 * 60 * 24)))
SESSION_SAVE_EVERY_REQUEST = False


# === DRF / JWT ===
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAdminUser"
    ],
    "DEFAULT_PAGINATION_CLASS": "common.pagination.StandardPagination",
    "PAGE_SIZE": int(os.getenv("API_PAGE_SIZE", "10")),
    "EXCEPTION_HANDLER": "common.exceptions.envelope_exception_handler",
    "DEFAULT_THROTTLE_CLASSES": (
        "rest_framework.throttling.ScopedRateThrottle",
    ),
    "DEFAULT_THROTTLE_RATES": {
        "payments": os.getenv("API_THROTTLE_PAYMENTS", "60/hour"),
        "storefront": os.getenv("API_THROTTLE_STOREFRONT", "300/hour"),
        "login": os.getenv("API_THROTTLE_LOGIN", "20/hour"),
    },
}
API_MAX_PAGE_SIZE = int(os.getenv("API_MAX_PAGE_SIZE", "500"))

if RUNNING_TESTS:
    REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = ()

# Production serves JSON only (no browsable UI).
if not DEBUG:
    REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = (
        "rest_framework.renderers.JSONRenderer",
    )

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=int(os.getenv("JWT_ACCESS_HOURS", "8"))),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=int(os.getenv("JWT_REFRESH_DAYS", "7"))),
    "ROTATE_REFRESH_TOKENS": True,
    "AUTH_HEADER_TYPES": ("Bearer",),
    "ALGORITHM": os.getenv("JWT_ALGORITHM", "HS256"),
    "SIGNING_KEY": os.getenv("JWT_SIGNING_KEY", SECRET_KEY),
}


# === PAYMENT GATEWAY (Razorpay) ===
RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "").strip()
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "").strip()
RAZORPAY_API_BASE = os.getenv("RAZORPAY_API_BASE", "https://api.razorpay.com/v1").rstrip("/")
RAZORPAY_TIMEOUT = int(os.getenv("RAZORPAY_TIMEOUT", "10"))
PAYMENT_DEFAULT_CURRENCY = os.getenv("PAYMENT_DEFAULT_CURRENCY", "INR")
PAYMENT_MERCHANT_NAME = os.getenv("PAYMENT_MERCHANT_NAME", "Kalyan Enterprises")

if STRICT_CONFIG and not (RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET):
    raise ImproperlyConfigured(
        "RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET are required when DEBUG=False."
    )


# === POLICIES ===
COMPANY_NAME = os.getenv("COMPANY_NAME", "Kalyan Enterprises")
POLICY_EXPIRING_SOON_DAYS = int(os.getenv("POLICY_EXPIRING_SOON_DAYS", "30"))
CERTIFICATE_TEMPLATE_PDF = os.getenv(
    "CERTIFICATE_TEMPLATE_PDF",
    str(BASE_DIR / "static" / "certificates" / "LETTERHEAD.pdf"),
)


# === INTERNATIONALIZATION ===
LANGUAGE_CODE = "en-in"
TIME_ZONE = os.getenv("TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True


# === STATIC & MEDIA ===
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# === EMAIL ===
EMAIL_BACKEND = os.getenv(
    "DJANGO_EMAIL_BACKEND",
    os.getenv("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend"),
)
EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = _bool(os.getenv("EMAIL_USE_TLS"), True)
EMAIL_USE_SSL = _bool(os.getenv("EMAIL_USE_SSL"), False)
EMAIL_TIMEOUT = int(os.getenv("EMAIL_TIMEOUT", "10"))
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "no-reply@kalyanrsa.in")
# Recipients of the "new policy sold" notification
ADMIN_NOTIFICATION_EMAILS = _csv(os.getenv("ADMIN_NOTIFICATION_EMAILS", ""))
if (
    STRICT_CONFIG
    and EMAIL_BACKEND.endswith("console.EmailBackend")
    and not _bool(os.getenv("ALLOW_CONSOLE_EMAIL_IN_PROD"), False)
):
    raise ImproperlyConfigured(
        "EMAIL_BACKEND points to the console in production. Configure SMTP or set ALLOW_CONSOLE_EMAIL_IN_PROD=true."
    )


# === LOGGING ===
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}


# === SECURITY / COOKIES ===
SESSION_COOKIE_SECURE = _bool(os.getenv("SESSION_COOKIE_SECURE"), STRICT_CONFIG)
CSRF_COOKIE_SECURE = _bool(os.getenv("CSRF_COOKIE_SECURE"), STRICT_CONFIG)
SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")
CSRF_COOKIE_SAMESITE = os.getenv("CSRF_COOKIE_SAMESITE", "Lax")
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_SSL_REDIRECT = _bool(os.getenv("SECURE_SSL_REDIRECT"), STRICT_CONFIG)
SECURE_HSTS_SECONDS = int(os.getenv("SECURE_HSTS_SECONDS", "3600" if STRICT_CONFIG else "0"))
SECURE_HSTS_INCLUDE_SUBDOMAINS = _bool(os.getenv("SECURE_HSTS_INCLUDE_SUBDOMAINS"), True)
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_HTTPONLY = True


# === DEFAULTS ===
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
