"""Scheduled publishing and unpublishing of content nodes."""

__version__ = "0.1.0"
