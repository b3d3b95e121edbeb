"""
Issue deduplication.

The same DOM problem is usually reported once per audited UI state. Issues
are collapsed on (rule, selector, page URL); the state they were seen in
is deliberately not part of the fingerprint.
"""

from typing import Iterable

from ..models.scan import DeepScanIssue


class IssueDeduplicator:
    """Collapses repeated findings while preserving first-seen order."""

    @staticmethod
    def fingerprint(issue: DeepScanIssue) -> str:
        return f"{issue.rule}::{issue.selector}::{issue.page_url}"

    def dedupe(self, issues: Iterable[DeepScanIssue]) -> list[DeepScanIssue]:
        """
        Drop issues whose fingerprint was already seen.

        Args:
            issues: Issues in discovery order

        Returns:
            First occurrence of each fingerprint, in input order
        """
        seen: set[str] = set()
        deduplicated: list[DeepScanIssue] = []

        for issue in issues:
            key = self.fingerprint(issue)
            if key not in seen:
                seen.add(key)
                deduplicated.append(issue)

        return deduplicated


# Global deduplicator instance
issue_deduplicator = IssueDeduplicator()
