"""Remote execution boundary and connections."""

from pytraverse.driver.remote import RemoteConnection, RemoteStrategy, RemoteTraversal
from pytraverse.driver.static import StaticRemoteConnection

__all__ = [
    "RemoteConnection",
    "RemoteStrategy",
    "RemoteTraversal",
    "StaticRemoteConnection",
]
