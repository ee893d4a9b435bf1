import os

from dotenv import load_dotenv

from ekatra.errors import ConfigError

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    def __init__(self):
        # Catalog defaults
        self.DEFAULT_CURRENCY = os.environ.get("EKATRA_DEFAULT_CURRENCY", "INR").strip().upper()
        self.SUPPORTED_CURRENCIES = [
            code.strip().upper()
            for code in os.environ.get("EKATRA_SUPPORTED_CURRENCIES", "INR,USD,EUR,GBP").split(",")
            if code.strip()
        ]

        # MIME probe (HEAD request on unknown extensions)
        self.MIME_PROBE_ENABLED = _as_bool(os.environ.get("EKATRA_MIME_PROBE_ENABLED", "false"))
        self.MIME_PROBE_TIMEOUT = float(os.environ.get("EKATRA_MIME_PROBE_TIMEOUT", "0.8"))

        # HTTP adapter
        self.TEST_ROUTES_ENABLED = _as_bool(os.environ.get("EKATRA_TEST_ROUTES_ENABLED", "true"))

        # Error tracking
        self.SENTRY_DSN = os.environ.get("SENTRY_DSN", "")
        self.ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

        # Application settings
        self.DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def has_sentry(self) -> bool:
        return bool(self.SENTRY_DSN)

    def validate(self):
        """Check cross-field consistency of the loaded settings."""
        if not self.SUPPORTED_CURRENCIES:
            raise ConfigError("EKATRA_SUPPORTED_CURRENCIES must list at least one currency")
        if self.DEFAULT_CURRENCY not in self.SUPPORTED_CURRENCIES:
            raise ConfigError(
                f"Default currency {self.DEFAULT_CURRENCY} is not in the supported list: "
                f"{', '.join(self.SUPPORTED_CURRENCIES)}"
            )
        if self.MIME_PROBE_TIMEOUT <= 0 or self.MIME_PROBE_TIMEOUT >= 1:
            raise ConfigError("EKATRA_MIME_PROBE_TIMEOUT must be between 0 and 1 second")


# Create an instance
config = Config()
