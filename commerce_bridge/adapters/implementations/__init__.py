"""Concrete clients for the WooCommerce and WordPress REST APIs."""

from .woocommerce import WooCommerceClient
from .wordpress import RANKMATH_NAMESPACE, WP_NAMESPACE, YOAST_NAMESPACE, WordPressClient

__all__ = [
    'WooCommerceClient',
    'WordPressClient',
    'WP_NAMESPACE',
    'YOAST_NAMESPACE',
    'RANKMATH_NAMESPACE',
]
