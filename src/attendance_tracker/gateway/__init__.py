"""Boundary with the managed backend (auth + relational store)."""
from __future__ import annotations

from .base import AuthSession, AuthUser, Gateway, GatewayFailure, GatewayResult, require_user

__all__ = ["AuthSession", "AuthUser", "Gateway", "GatewayFailure", "GatewayResult", "require_user"]
