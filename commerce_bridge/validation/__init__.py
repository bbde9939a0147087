"""Typed validation of tool inputs."""

from commerce_bridge.validation.base import RequestModel, validate

__all__ = ["RequestModel", "validate"]
