"""
Accessibility audit capture.

The rule engine itself is axe-core running inside the page; this module
injects it, runs it, and flattens its violations into node-level findings.
"""

import os
from typing import Optional, Protocol

from ..config import config
from ..exceptions import AuditError, AuditInjectionError
from ..models.scan import RawFinding
from .navigator import Navigator

AXE_RUN_SCRIPT = "async () => await window.axe.run()"
AXE_PRESENT_SCRIPT = "() => typeof window.axe !== 'undefined'"


class AccessibilityAuditor(Protocol):
    """Runs one audit against the page's current DOM."""

    async def run(self, navigator: Navigator) -> dict: ...


class AxeAuditor:
    """
    axe-core auditor.

    Injects ``axe.min.js`` from disk into the page before each run, since
    state transitions may have replaced the document.
    """

    def __init__(self, script_path: Optional[str] = None):
        self.script_path = script_path or config.audit.AXE_SCRIPT_PATH

    async def run(self, navigator: Navigator) -> dict:
        """
        Audit the current page state.

        Returns:
            axe results: ``{"violations": [{id, nodes, description, helpUrl, tags}]}``

        Raises:
            AuditInjectionError: If axe cannot be loaded into the page
            AuditError: If axe.run fails
        """
        if not os.path.exists(self.script_path):
            raise AuditInjectionError(f"axe-core not found at {self.script_path}")

        try:
            await navigator.add_script(self.script_path)
            loaded = await navigator.evaluate(AXE_PRESENT_SCRIPT)
        except Exception as e:
            raise AuditInjectionError(str(e)) from e

        if not loaded:
            raise AuditInjectionError("axe was injected but window.axe not found")

        try:
            results = await navigator.evaluate(AXE_RUN_SCRIPT)
        except Exception as e:
            raise AuditError(f"axe.run failed: {e}") from e

        return results or {"violations": []}


def _selector(target) -> str:
    # iframe and shadow DOM targets arrive as nested lists
    parts = []
    for part in target or []:
        if isinstance(part, list):
            parts.append(" ".join(str(p) for p in part))
        else:
            parts.append(str(part))
    return ", ".join(parts)


def findings_from_results(results: dict) -> list[RawFinding]:
    """
    Flatten axe violations into one finding per affected node.

    Args:
        results: axe results dictionary

    Returns:
        List of RawFinding in axe's reporting order
    """
    findings: list[RawFinding] = []

    for violation in results.get("violations") or []:
        wcag_tags = [t for t in violation.get("tags") or [] if t.startswith("wcag")]
        for node in violation.get("nodes") or []:
            findings.append(RawFinding(
                rule=violation["id"],
                impact=node.get("impact") or "minor",
                description=violation.get("description") or "",
                help_url=violation.get("helpUrl") or "",
                selector=_selector(node.get("target")),
                html=node.get("html") or "",
                wcag_tags=wcag_tags,
            ))

    return findings
