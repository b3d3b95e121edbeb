"""
UI state exploration.

Drives one loaded page through a short, profile-gated sequence of UI
transitions (dismiss the cookie banner, open the navigation, open one
interactive widget) so each reachable state can be audited.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from ..config import InteractionConfig, config
from ..models.profiles import LegacyScanProfile
from ..models.scan import PageState, StateName, StateTestResult
from ..utils.logger import get_states_logger
from .navigator import Navigator

# Initialize logger
logger = get_states_logger()


# Selector priority lists; the first visible match wins
COOKIE_SELECTORS = (
    '[id*="cookie" i] button',
    '[class*="cookie" i] button',
    '[id*="consent" i] button',
    '[class*="consent" i] button',
    '[aria-label*="accept" i]',
    '[aria-label*="consent" i]',
    'button:has-text("Accept")',
    'button:has-text("Got it")',
    'button:has-text("OK")',
    'button:has-text("I agree")',
)

NAV_SELECTORS = (
    '[aria-label*="menu" i]:not([aria-expanded="true"])',
    '[aria-label*="navigation" i]:not([aria-expanded="true"])',
    'button[class*="menu" i]:not([aria-expanded="true"])',
    'button[class*="nav" i]:not([aria-expanded="true"])',
    '[class*="hamburger" i]',
    '[class*="mobile-menu" i] button',
    'nav button',
)

MODAL_SELECTORS = (
    '[data-modal-open]',
    '[data-toggle="modal"]',
    'button[class*="modal" i]',
    '[aria-haspopup="dialog"]',
)

ACCORDION_SELECTORS = (
    '[role="button"][aria-expanded="false"]',
    'button[class*="accordion" i][aria-expanded="false"]',
    '[data-accordion-trigger][aria-expanded="false"]',
)

TAB_SELECTORS = (
    '[role="tab"][aria-selected="false"]',
    'button[class*="tab" i]:not([aria-selected="true"])',
)

# Tried in order; the first widget that opens is the page's interactive state
INTERACTIVE_TARGETS = (
    (StateName.MODAL_OPEN, "First modal opened", MODAL_SELECTORS),
    (StateName.ACCORDION_OPEN, "First accordion expanded", ACCORDION_SELECTORS),
    (StateName.TAB_SWITCHED, "First tab switched", TAB_SELECTORS),
)

StepAction = Callable[[Navigator, InteractionConfig], Awaitable[Optional[PageState]]]


async def _click_first_visible(
    navigator: Navigator,
    selectors: tuple[str, ...],
    interaction_config: InteractionConfig,
) -> bool:
    """
    Click the first visible element matching any selector, in order.

    Returns:
        True if a click succeeded
    """
    for selector in selectors:
        try:
            element = navigator.locator(selector)
            if await element.is_visible(interaction_config.VISIBILITY_TIMEOUT_MS):
                await element.click(interaction_config.CLICK_TIMEOUT_MS)
                logger.debug(f"[STATES] Clicked {selector}")
                return True
        except Exception as e:
            logger.debug(f"[STATES] Selector {selector} unusable: {e}")
    return False


async def dismiss_cookies(navigator: Navigator, interaction_config: InteractionConfig) -> PageState:
    success = await _click_first_visible(navigator, COOKIE_SELECTORS, interaction_config)
    return PageState(
        name=StateName.COOKIES_DISMISSED.value,
        description="After dismissing cookie banner",
        success=success,
    )


async def open_navigation(navigator: Navigator, interaction_config: InteractionConfig) -> PageState:
    """Expand the primary navigation. An already expanded menu counts as opened."""
    success = False
    for selector in NAV_SELECTORS:
        try:
            element = navigator.locator(selector)
            if not await element.is_visible(interaction_config.VISIBILITY_TIMEOUT_MS):
                continue
            if await element.get_attribute("aria-expanded") != "true":
                await element.click(interaction_config.CLICK_TIMEOUT_MS)
            success = True
            break
        except Exception as e:
            logger.debug(f"[STATES] Selector {selector} unusable: {e}")

    return PageState(
        name=StateName.MENU_OPEN.value,
        description="Primary navigation expanded",
        success=success,
    )


async def open_interactive_component(
    navigator: Navigator,
    interaction_config: InteractionConfig,
) -> Optional[PageState]:
    """Open the first modal, accordion or tab found. None if nothing opened."""
    for state_name, description, selectors in INTERACTIVE_TARGETS:
        if await _click_first_visible(navigator, selectors, interaction_config):
            return PageState(name=state_name.value, description=description, success=True)
    return None


@dataclass(frozen=True)
class InteractionStep:
    """
    One transition in the exploration sequence.

    ``action`` returns the resulting state, or None when the step should
    leave no trace in the result. ``settle`` waits for animations after a
    step that produced a state.
    """

    name: str
    profiles: frozenset
    action: StepAction
    settle: bool = False

    def applies_to(self, profile: LegacyScanProfile) -> bool:
        return profile in self.profiles


_STANDARD_AND_DEEP = frozenset({LegacyScanProfile.STANDARD, LegacyScanProfile.DEEP})
_DEEP_ONLY = frozenset({LegacyScanProfile.DEEP})

DEFAULT_STEPS: tuple[InteractionStep, ...] = (
    InteractionStep(StateName.COOKIES_DISMISSED.value, _STANDARD_AND_DEEP, dismiss_cookies, settle=True),
    InteractionStep(StateName.MENU_OPEN.value, _DEEP_ONLY, open_navigation, settle=True),
    InteractionStep("interactive-component", _DEEP_ONLY, open_interactive_component, settle=True),
)


class StateExplorer:
    """
    Runs the interaction steps that apply to a profile, in order.

    The ``default`` state is always first and always successful. Each step
    gets one attempt; a failed step is recorded and the sequence goes on.
    States accumulate: later steps run on top of earlier transitions.
    """

    def __init__(
        self,
        steps: tuple[InteractionStep, ...] = DEFAULT_STEPS,
        interaction_config: Optional[InteractionConfig] = None,
    ):
        self.steps = steps
        self.interaction_config = interaction_config or config.interaction

    async def explore(
        self,
        navigator: Navigator,
        profile: Union[str, LegacyScanProfile],
    ) -> StateTestResult:
        """
        Explore the UI states of the page currently loaded in navigator.

        Args:
            navigator: Page already navigated to the target URL
            profile: quick, standard or deep

        Returns:
            StateTestResult with the states reached, default first
        """
        try:
            profile = LegacyScanProfile(profile)
        except ValueError:
            logger.warning(f"[STATES] Unknown profile '{profile}', exploring default state only")
            profile = None

        states = [PageState(name=StateName.DEFAULT.value, description="Initial page load", success=True)]

        for step in self.steps:
            if profile is None or not step.applies_to(profile):
                continue

            try:
                state = await step.action(navigator, self.interaction_config)
            except Exception as e:
                logger.warning(f"[STATES] Step {step.name} failed: {e}")
                state = None

            if state is not None:
                states.append(state)
                logger.debug(f"[STATES] {state.name}: success={state.success}")

            if step.settle and state is not None:
                await navigator.wait(self.interaction_config.SETTLE_MS)

        return StateTestResult(states=states, total_states=len(states))


# Global state explorer instance
state_explorer = StateExplorer()
