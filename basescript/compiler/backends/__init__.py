"""Backend handler registry: one handler per supported automation backend."""

from basescript.compiler.backends.base import BackendHandler
from basescript.compiler.backends.playwright import PlaywrightHandler
from basescript.compiler.backends.puppeteer import PuppeteerHandler
from basescript.compiler.backends.selenium import SeleniumHandler
from basescript.compiler.types import Backend

HANDLERS: dict[Backend, BackendHandler] = {
    Backend.PUPPETEER: PuppeteerHandler(),
    Backend.PLAYWRIGHT: PlaywrightHandler(),
    Backend.SELENIUM: SeleniumHandler(),
}


def get_handler(tag: str | Backend) -> BackendHandler:
    """Return the handler for a backend tag. Raises ValueError for unknown tags."""
    return HANDLERS[Backend(tag)]


__all__ = [
    "BackendHandler",
    "HANDLERS",
    "PlaywrightHandler",
    "PuppeteerHandler",
    "SeleniumHandler",
    "get_handler",
]
