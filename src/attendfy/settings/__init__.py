import os


def get_settings_module() -> str:
    # APP_ENV chooses the settings module, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "attendfy.settings.production"

    if env in {"test", "testing"}:
        return "attendfy.settings.testing"

    return "attendfy.settings.development"
