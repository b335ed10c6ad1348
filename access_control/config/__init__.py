from access_control.config.settings import settings, Settings

__all__ = ["settings", "Settings"]
