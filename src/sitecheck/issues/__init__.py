"""Findings reported by checks."""

from .manager import IssueManager
from .models import Issue

__all__ = ["Issue", "IssueManager"]
