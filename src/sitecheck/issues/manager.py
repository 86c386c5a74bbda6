"""In-memory issue store."""

from sitecheck.events import EventEmitter

from .models import Issue


class IssueManager:
    """Collects issues in report order and announces each one."""

    def __init__(self) -> None:
        self.issues: list[Issue] = []
        self.events = EventEmitter()

    def __len__(self) -> int:
        return len(self.issues)

    def add(self, issue: Issue) -> None:
        self.issues.append(issue)
        self.events.emit("new-issue", issue)
