"""
Scan profile resolution.

Maps profile names to crawl budgets, selects a profile for a user tier,
and produces the dual-mode crawl options consumed by the crawler.
"""

from types import MappingProxyType
from typing import Optional, Union

from ..config import config
from ..exceptions import ProfileAccessError, UnknownProfileError
from ..models.profiles import (
    BudgetedCrawlConfig,
    CrawlBudget,
    CrawlOptions,
    CrawlStrategy,
    LegacyCrawlConfig,
    LegacyScanProfile,
    PagePriority,
    ScanProfile,
    UserTier,
)


# Predefined profile budgets
PROFILE_BUDGETS: "MappingProxyType[ScanProfile, CrawlBudget]" = MappingProxyType({
    ScanProfile.QUICK: CrawlBudget(
        max_urls=50,
        max_duration_ms=5 * 60 * 1000,  # 5 minutes
        strategy=CrawlStrategy.COMPLETE,
        sitemap_first=True,
        priority_order=(
            PagePriority.HOMEPAGE,
            PagePriority.NAVIGATION,
            PagePriority.PRODUCT,
            PagePriority.CONTENT,
            PagePriority.UTILITY,
        ),
    ),
    ScanProfile.SMART: CrawlBudget(
        max_urls=150,
        max_duration_ms=10 * 60 * 1000,  # 10 minutes
        strategy=CrawlStrategy.PRIORITY_SAMPLING,
        sitemap_first=True,
        priority_order=(
            PagePriority.HOMEPAGE,
            PagePriority.PRODUCT,
            PagePriority.NAVIGATION,
            PagePriority.CONTENT,
            PagePriority.UTILITY,
        ),
        enterprise_detection_threshold=150,
    ),
    ScanProfile.DEEP: CrawlBudget(
        max_urls=1000,
        max_duration_ms=30 * 60 * 1000,  # 30 minutes
        strategy=CrawlStrategy.COMPREHENSIVE,
        sitemap_first=True,
        priority_order=(
            PagePriority.HOMEPAGE,
            PagePriority.PRODUCT,
            PagePriority.NAVIGATION,
            PagePriority.CONTENT,
            PagePriority.UTILITY,
        ),
        resumable=True,
        checkpoint_interval=100,
    ),
})

# Legacy three-tier crawl table
LEGACY_PROFILE_CONFIGS: "MappingProxyType[LegacyScanProfile, LegacyCrawlConfig]" = MappingProxyType({
    LegacyScanProfile.QUICK: LegacyCrawlConfig(max_pages=1, max_depth=0, timeout_ms=60000),
    LegacyScanProfile.STANDARD: LegacyCrawlConfig(max_pages=3, max_depth=1, timeout_ms=120000),
    LegacyScanProfile.DEEP: LegacyCrawlConfig(max_pages=5, max_depth=2, timeout_ms=180000),
})

# State exploration depth for each budgeted profile
_EXPLORATION_PROFILES = {
    ScanProfile.QUICK: LegacyScanProfile.QUICK,
    ScanProfile.SMART: LegacyScanProfile.STANDARD,
    ScanProfile.DEEP: LegacyScanProfile.DEEP,
}

SITEMAP_QUICK_THRESHOLD = 50


def _as_budgeted(profile: Union[str, ScanProfile]) -> Optional[ScanProfile]:
    """Return the budgeted profile for an exact QUICK/SMART/DEEP name."""
    if isinstance(profile, ScanProfile):
        return profile
    try:
        return ScanProfile(profile)
    except ValueError:
        return None


def resolve_budget(profile: Union[str, ScanProfile]) -> CrawlBudget:
    """
    Get the budget for a profile.

    Profile names are matched case-insensitively, so 'smart' and 'SMART'
    resolve to the same budget.

    Raises:
        UnknownProfileError: If the name is not QUICK, SMART or DEEP
    """
    name = profile.value if isinstance(profile, ScanProfile) else str(profile).upper()
    budgeted = _as_budgeted(name)
    if budgeted is None:
        raise UnknownProfileError(str(profile), [p.value for p in ScanProfile])
    return PROFILE_BUDGETS[budgeted]


def resolve_crawl_config(
    profile: Union[str, ScanProfile, LegacyScanProfile],
    scan_profiles_enabled: Optional[bool] = None,
) -> CrawlOptions:
    """
    Get crawl options for a profile.

    Budgeted options are returned only when scan profiles are enabled and the
    name is exactly QUICK, SMART or DEEP. Everything else goes through the
    legacy table: the name is lowercased, and names outside quick/standard/deep
    fall back to standard.

    Args:
        profile: Profile name
        scan_profiles_enabled: Feature flag; read from config when omitted

    Returns:
        BudgetedCrawlConfig or LegacyCrawlConfig
    """
    if scan_profiles_enabled is None:
        scan_profiles_enabled = config.features.scan_profiles

    if isinstance(profile, LegacyScanProfile):
        profile = profile.value

    budgeted = _as_budgeted(profile)
    if scan_profiles_enabled and budgeted is not None:
        budget = PROFILE_BUDGETS[budgeted]
        return BudgetedCrawlConfig(
            max_pages=budget.max_urls,
            timeout_ms=budget.max_duration_ms,
            same_origin_only=True,
            budget=budget,
            profile=budgeted,
        )

    name = profile.value if isinstance(profile, ScanProfile) else str(profile)
    try:
        legacy = LegacyScanProfile(name.lower())
    except ValueError:
        legacy = LegacyScanProfile.STANDARD
    return LEGACY_PROFILE_CONFIGS[legacy]


def exploration_profile(profile: Union[str, ScanProfile, LegacyScanProfile]) -> LegacyScanProfile:
    """
    Map any profile name to the state-exploration depth.

    QUICK explores like quick, SMART like standard, DEEP like deep.
    Unrecognized names explore like standard.
    """
    if isinstance(profile, LegacyScanProfile):
        return profile
    budgeted = _as_budgeted(profile)
    if budgeted is not None:
        return _EXPLORATION_PROFILES[budgeted]
    try:
        return LegacyScanProfile(str(profile).lower())
    except ValueError:
        return LegacyScanProfile.STANDARD


def select_scan_profile(
    user_tier: UserTier,
    sitemap_url_count: Optional[int] = None,
    user_override: Optional[ScanProfile] = None,
) -> ScanProfile:
    """
    Select a scan profile from the user tier and site hints.

    Args:
        user_tier: Subscription tier
        sitemap_url_count: Number of URLs in the sitemap, if known
        user_override: Manual profile choice (DEEP needs Enterprise)

    Raises:
        ProfileAccessError: If a non-enterprise user overrides to DEEP
    """
    user_tier = UserTier(user_tier)

    if user_override is not None:
        user_override = ScanProfile(user_override)
        if not can_use_profile(user_override, user_tier):
            raise ProfileAccessError(user_override.value, user_tier.value)
        return user_override

    if user_tier == UserTier.ENTERPRISE:
        return ScanProfile.DEEP

    if sitemap_url_count is not None:
        if sitemap_url_count <= SITEMAP_QUICK_THRESHOLD:
            return ScanProfile.QUICK
        return ScanProfile.SMART

    return ScanProfile.SMART if user_tier == UserTier.PRO else ScanProfile.QUICK


def can_use_profile(profile: ScanProfile, user_tier: UserTier) -> bool:
    """DEEP is Enterprise only; QUICK and SMART are open to every tier."""
    if ScanProfile(profile) == ScanProfile.DEEP:
        return UserTier(user_tier) == UserTier.ENTERPRISE
    return True
