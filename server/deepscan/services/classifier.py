"""
Rule classifier for accessibility findings.

Separates confirmed WCAG violations from best-practice advisories using
two static lookup tables keyed by axe rule id.
"""

from types import MappingProxyType
from typing import Iterable

from ..models.scan import IssueTier, Tier, TierSummary


def _rule(reason: str, reference: str = None, level: str = None, manual: bool = False) -> MappingProxyType:
    return MappingProxyType({
        "wcag_reference": reference,
        "wcag_level": level,
        "requires_manual_review": manual,
        "reason": reason,
    })


# Confirmed WCAG 2.2 A/AA/AAA failures
VIOLATION_RULES = MappingProxyType({
    # WCAG Level A
    "aria-allowed-attr": _rule("ARIA attributes must be valid for their role", "4.1.2", "A"),
    "aria-required-attr": _rule("Required ARIA attributes must be present", "4.1.2", "A"),
    "aria-valid-attr-value": _rule("ARIA attribute values must be valid", "4.1.2", "A"),
    "aria-valid-attr": _rule("ARIA attributes must be valid", "4.1.2", "A"),
    "button-name": _rule("Buttons must have accessible names", "4.1.2", "A"),
    "image-alt": _rule("Images must have alternative text", "1.1.1", "A"),
    "input-button-name": _rule("Input buttons must have accessible names", "4.1.2", "A"),
    "link-name": _rule("Links must have accessible names", "4.1.2", "A"),
    "html-has-lang": _rule("HTML element must have a lang attribute", "3.1.1", "A"),
    "html-lang-valid": _rule("HTML lang attribute must be valid", "3.1.1", "A"),
    "valid-lang": _rule("Lang attributes must have valid values", "3.1.2", "AA"),
    "form-field-multiple-labels": _rule("Form fields should not have multiple labels", "1.3.1", "A"),
    "label": _rule("Form elements must have labels", "4.1.2", "A"),
    # Caption presence can be detected, caption quality cannot
    "video-caption": _rule("Video elements must have captions", "1.2.2", "A", manual=True),

    # WCAG Level AA / AAA
    "color-contrast": _rule("Text must have sufficient color contrast", "1.4.3", "AA"),
    "color-contrast-enhanced": _rule("Enhanced color contrast for AAA compliance", "1.4.6", "AAA"),
    "link-in-text-block": _rule("Links in text blocks must be visually distinct", "1.4.1", "A"),
    "meta-viewport": _rule("Zooming and scaling must not be disabled", "1.4.4", "AA"),
    "meta-viewport-large": _rule("maximum-scale should not prevent zooming", "1.4.4", "AA"),

    # Keyboard & focus
    "tabindex": _rule("Tab order must be logical (no positive tabindex)", "2.4.3", "A"),
    "accesskeys": _rule("Access keys should not duplicate", "2.4.1", "A"),

    # Structure & semantics
    "list": _rule("List elements must be properly structured", "1.3.1", "A"),
    "listitem": _rule("List items must be contained in list elements", "1.3.1", "A"),
    "definition-list": _rule("Definition lists must be properly structured", "1.3.1", "A"),
    "dlitem": _rule("DL items must be in definition lists", "1.3.1", "A"),

    # Tables
    "table-duplicate-name": _rule("Tables should not have duplicate accessible names", "1.3.1", "A"),
    "td-headers-attr": _rule("Table cells with headers attribute must reference valid headers", "1.3.1", "A"),
    "th-has-data-cells": _rule("Table headers must have associated data cells", "1.3.1", "A"),

    # Frames
    "frame-title": _rule("Frames must have accessible titles", "4.1.2", "A"),
    "frame-title-unique": _rule("Frame titles must be unique", "4.1.2", "A"),
})

# Best practices and structural recommendations. Never counted toward compliance.
ADVISORY_RULES = MappingProxyType({
    # Heading hierarchy
    "heading-order": _rule("Headings should be in logical order (best practice)", "1.3.1", "A", manual=True),
    "page-has-heading-one": _rule("Page should have an H1 heading (best practice)", manual=True),
    "empty-heading": _rule("Headings should not be empty", "1.3.1", "A", manual=True),

    # Landmarks & structure
    "landmark-one-main": _rule("Page should have one main landmark (best practice)", "1.3.1", "A", manual=True),
    "landmark-unique": _rule("Landmarks should have unique labels (best practice)", manual=True),
    "region": _rule("Content should be contained in landmarks (best practice)", manual=True),
    "landmark-no-duplicate-banner": _rule("Page should not have duplicate banner landmarks", manual=True),
    "landmark-no-duplicate-contentinfo": _rule("Page should not have duplicate contentinfo landmarks", manual=True),

    # Skip links
    "skip-link": _rule("Page should have skip links (best practice)", "2.4.1", "A", manual=True),
    "bypass": _rule("Mechanism to skip repeated content (may need review)", "2.4.1", "A", manual=True),

    # Forms
    "label-content-name-mismatch": _rule("Label text should match accessible name (needs review)", "2.5.3", "A", manual=True),
    "autocomplete-valid": _rule("Autocomplete attributes should be appropriate", "1.3.5", "AA", manual=True),

    # Links
    "identical-links-same-purpose": _rule("Identical links should serve same purpose (needs review)", "2.4.4", "A", manual=True),

    # Images
    "image-redundant-alt": _rule("Alt text may be redundant (needs review)", manual=True),
    "object-alt": _rule("Object elements should have alternative text", "1.1.1", "A", manual=True),

    # Focus management
    "focus-order-semantics": _rule("Focus order should follow semantic structure (needs review)", "2.4.3", "A", manual=True),

    # Other
    "scrollable-region-focusable": _rule("Scrollable regions should be keyboard accessible", "2.1.1", "A", manual=True),
    "svg-img-alt": _rule("SVG images should have alternative text", "1.1.1", "A", manual=True),
})


class RuleClassifier:
    """
    Classifies axe rule ids into violation or advisory tiers.

    Lookup order is the violation table, then the advisory table. Rule ids
    found in neither are reported as violations.
    """

    def __init__(self, violation_rules=VIOLATION_RULES, advisory_rules=ADVISORY_RULES):
        overlap = set(violation_rules) & set(advisory_rules)
        if overlap:
            raise ValueError(f"Rule ids present in both tiers: {sorted(overlap)}")
        self.violation_rules = violation_rules
        self.advisory_rules = advisory_rules

    def classify(self, rule_id: str) -> IssueTier:
        """
        Classify a rule id.

        Args:
            rule_id: axe rule id (e.g. 'image-alt')

        Returns:
            IssueTier for the rule
        """
        if rule_id in self.violation_rules:
            return IssueTier(tier=Tier.VIOLATION, **self.violation_rules[rule_id])

        if rule_id in self.advisory_rules:
            return IssueTier(tier=Tier.ADVISORY, **self.advisory_rules[rule_id])

        return IssueTier(
            tier=Tier.VIOLATION,
            requires_manual_review=False,
            reason=f"Unknown rule: {rule_id} (defaulting to violation)",
        )

    def summarize_by_tier(self, issues: Iterable) -> TierSummary:
        """
        Count issues per tier.

        Each issue is re-classified from its ``rule`` attribute so the tables
        stay the single source of truth.
        """
        violations = 0
        advisories = 0

        for issue in issues:
            if self.classify(issue.rule).tier == Tier.VIOLATION:
                violations += 1
            else:
                advisories += 1

        return TierSummary(
            violations=violations,
            advisories=advisories,
            total=violations + advisories,
        )


# Global classifier instance
rule_classifier = RuleClassifier()
