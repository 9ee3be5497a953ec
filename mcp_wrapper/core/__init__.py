"""Shared utilities: console logging setup and structured lifecycle logs."""
