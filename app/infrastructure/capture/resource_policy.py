"""Resource policy — allow or abort in-page requests by resource class.

Requests that cannot change a static capture (media, Playwright's "other"
bucket) are aborted. Everything else, including request types this module
does not classify (xhr, fetch, websocket, ...), is allowed: an unexpected
type must never block a resource the poster needs.
"""

import logging

from playwright.async_api import Page, Route

from app.domain.entities import ResourceClass, ResourceDecision

logger = logging.getLogger(__name__)

_BLOCKED_CLASSES = frozenset({ResourceClass.MEDIA, ResourceClass.OTHER})

_RESOURCE_TYPES: dict[str, ResourceClass] = {rc.value: rc for rc in ResourceClass}


def classify(resource_type: str) -> ResourceClass | None:
    """Map a Playwright ``request.resource_type`` to a ResourceClass, or None."""
    return _RESOURCE_TYPES.get(resource_type)


def decide(resource_class: ResourceClass | None) -> ResourceDecision:
    """Stateless policy decision; unclassified requests are allowed."""
    if resource_class in _BLOCKED_CLASSES:
        return ResourceDecision.ABORT
    return ResourceDecision.ALLOW


class ResourcePolicyFilter:
    """Route interceptor applying ``decide`` to every request of a page.

    Attach before navigation. Counters are informational only.
    """

    def __init__(self) -> None:
        self.allowed = 0
        self.aborted = 0

    async def attach(self, page: Page) -> None:
        await page.route("**/*", self.handle)
        logger.debug("Resource policy attached (blocked=%s)", sorted(c.value for c in _BLOCKED_CLASSES))

    async def handle(self, route: Route) -> None:
        request = route.request
        decision = decide(classify(request.resource_type))
        if decision is ResourceDecision.ABORT:
            self.aborted += 1
            logger.debug("Aborted %s request: %s", request.resource_type, request.url[:120])
            await route.abort("blockedbyclient")
            return
        self.allowed += 1
        await route.continue_()
