"""
Adapters package for Commerce Bridge.

This package contains components for talking to the upstream REST APIs:
- Abstract interfaces for connectors and cache stores
- Concrete WooCommerce and WordPress clients
- A factory that builds clients from settings
"""

from . import interfaces
from .factory import ClientFactory

__all__ = [
    'interfaces',
    'ClientFactory',
]
