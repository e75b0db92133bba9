"""Pydantic models for JSON:API resource documents."""

from .resource import (
    LinkageShape,
    Relationship,
    ResourceIdentifier,
    ResourceLinkage,
    ResourceObject,
)

__all__ = [
    "LinkageShape",
    "Relationship",
    "ResourceIdentifier",
    "ResourceLinkage",
    "ResourceObject",
]
