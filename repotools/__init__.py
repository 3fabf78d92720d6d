"""Maintenance tools for multi-module repositories: templates, Dependabot, GitHub files and CI reports."""

__version__ = "0.1.0"