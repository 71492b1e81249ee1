from fastapi import Request

from ..config import Settings
from ..services.link_store import LinkStore


# Dependencies to get the objects attached by the app factory
def get_store(request: Request) -> LinkStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
