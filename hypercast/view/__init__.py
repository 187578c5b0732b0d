"""Read-side helpers for casts, profiles and node status."""

from hypercast.view.casts import (
    CastView,
    Profile,
    cast_view,
    format_cast,
    format_node_info,
    format_profile,
    get_feed,
    get_profile,
    get_reaction_counts,
    get_replies,
)

__all__ = [
    "CastView",
    "Profile",
    "cast_view",
    "format_cast",
    "format_node_info",
    "format_profile",
    "get_feed",
    "get_profile",
    "get_reaction_counts",
    "get_replies",
]
