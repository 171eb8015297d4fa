from taklifnoma.config.settings import settings

__all__ = ["settings"]
