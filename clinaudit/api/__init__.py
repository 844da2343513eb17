"""Reference HTTP endpoint serving the list/replace_all contract."""

from clinaudit.api.app import create_app

__all__ = ["create_app"]
