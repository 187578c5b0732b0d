"""Authentication module."""

from hypercast.auth.context import AuthContext, create_client, load_auth, require_fid

__all__ = ["AuthContext", "create_client", "load_auth", "require_fid"]
