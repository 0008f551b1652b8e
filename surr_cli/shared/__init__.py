"""Shared helpers for the surrcli tools."""
