"""Signed write actions."""

from hypercast.actions.post import CastActions

__all__ = ["CastActions"]
