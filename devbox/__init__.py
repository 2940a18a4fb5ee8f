"""devbox — idempotent workstation setup and repository sync."""

__version__ = "0.1.0"
