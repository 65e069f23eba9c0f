"""FastAPI dependencies shared by the routers."""

from infra.bootstrap import BotBootstrap


def get_bot() -> BotBootstrap:
    """Process-wide bot services (overridden in tests)."""
    return BotBootstrap.get_instance()
