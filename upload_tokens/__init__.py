"""Temporary upload references for stateless request/response round-trips."""

__version__ = "0.1.0"
