"""Helpers for mobile Rust project tooling: paths, versions, git, links, cargo, template packs and reports."""

__version__ = "0.1.0"