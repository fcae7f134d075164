"""Public interface for the LDAP directory adapter."""

from __future__ import annotations

from .client import ConnectionFactory, LdapDirectory

__all__ = ["ConnectionFactory", "LdapDirectory"]
