"""Exceptions raised by portfolio-sync."""

from __future__ import annotations


class PortfolioSyncError(Exception):
    """Base error for portfolio-sync."""


class ConfigNotFoundError(PortfolioSyncError):
    """No .portfolio.json where one was required."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"No .portfolio.json found at {path}")


class ConfigExistsError(PortfolioSyncError):
    """A .portfolio.json already exists and would be overwritten."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"A .portfolio.json already exists at {path}")


class InvalidConfigError(PortfolioSyncError):
    """A .portfolio.json could not be parsed or failed validation."""

    def __init__(self, path, errors: list[str]):
        self.path = path
        self.errors = errors
        super().__init__(f"Invalid .portfolio.json at {path}: {'; '.join(errors)}")


class GitHubError(PortfolioSyncError):
    """Error talking to the GitHub API."""
