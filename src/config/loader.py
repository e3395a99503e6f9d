"""Settings loader that turns validation failures into startup errors.

``Settings()`` raises pydantic's ``ValidationError`` when a required
variable is missing or malformed.  Entry points call :func:`load_settings`
instead so the failure surfaces as a :class:`ConfigurationError` naming
every offending environment variable, without echoing secret values.
"""

from pydantic import ValidationError

from src.config.settings import Settings
from src.utils.errors import ConfigurationError


def load_settings(**overrides: object) -> Settings:
    """Build :class:`Settings` from the environment, ``.env`` and YAML defaults.

    Args:
        overrides: Values that take precedence over every other source.

    Raises:
        ConfigurationError: If any required value is missing or invalid.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            problems.append(f"{field.upper()}: {error['msg']}")
        raise ConfigurationError(
            message="Invalid configuration: " + "; ".join(problems),
        ) from exc
