from .converter import router as converter_router

_routers = [converter_router]

__all__ = ["get_routers"]


def get_routers():
    return _routers
