"""
Prerender Gate - Request Classifier
====================================

What:  Decides whether a request should be answered with a snapshot.
How:   Ordered rule evaluation over a RequestDescriptor. The first rule that
       disqualifies the request wins; the crawler signal is collected before
       the static-asset and URL-filter gates, which can still veto it.
Who:   PrerenderService, once per request, before any cache or network I/O.

Rule order:
    1. No User-Agent                         → not eligible
    2. Method other than GET/HEAD            → not eligible
    3. X-Prerender header (already a render) → not eligible
    4. wants_snapshot = _escaped_fragment_ OR crawler User-Agent OR X-BufferBot
    5. Path ends with an ignored extension   → not eligible
    6. Whitelist set and nothing matches     → not eligible
    7. Blacklist matches URL or Referer      → not eligible
    8. → wants_snapshot

Patterns are compiled once here, so a malformed whitelist/blacklist entry
raises re.error when the classifier is constructed.
"""

import logging
import re
from typing import List, Optional, Sequence

from prerender_gate.config import PrerenderSettings
from prerender_gate.rules import CRAWLER_USER_AGENTS, EXTENSIONS_TO_IGNORE
from prerender_gate.schemas.snapshot import RequestDescriptor

logger = logging.getLogger(__name__)

SNAPSHOT_METHODS = {"GET", "HEAD"}

# Set by the rendering service on its own outbound page fetches.
RENDER_REQUEST_HEADER = "x-prerender"
BUFFER_BOT_HEADER = "x-bufferbot"
ESCAPED_FRAGMENT_PARAM = "_escaped_fragment_"


def _compile_patterns(patterns: Optional[Sequence[str]]) -> Optional[List[re.Pattern[str]]]:
    if patterns is None:
        return None
    return [re.compile(pattern) for pattern in patterns]


class RequestClassifier:
    """
    Snapshot eligibility rules bound to one PrerenderSettings value.

    Args:
        settings: Source of the whitelist and blacklist.
        crawler_user_agents: User-Agent substrings that identify crawlers.
        extensions_to_ignore: Path suffixes that are never snapshotted.
    """

    def __init__(
        self,
        settings: PrerenderSettings,
        crawler_user_agents: Sequence[str] = CRAWLER_USER_AGENTS,
        extensions_to_ignore: Sequence[str] = EXTENSIONS_TO_IGNORE,
    ):
        self._crawler_user_agents = [agent.lower() for agent in crawler_user_agents]
        self._extensions_to_ignore = tuple(extensions_to_ignore)
        self._whitelist = _compile_patterns(settings.whitelist)
        self._blacklist = _compile_patterns(settings.blacklist)

    def is_eligible(self, request: RequestDescriptor) -> bool:
        user_agent = request.user_agent

        if not user_agent:
            return False
        if request.method not in SNAPSHOT_METHODS:
            return False
        if request.header(RENDER_REQUEST_HEADER):
            logger.debug("Skipping %s: request comes from the rendering service", request.url)
            return False

        wants_snapshot = False
        if request.query_param(ESCAPED_FRAGMENT_PARAM):
            wants_snapshot = True
        if self.is_crawler(user_agent):
            wants_snapshot = True
        if request.header(BUFFER_BOT_HEADER):
            wants_snapshot = True

        if self.is_static_asset(request.path):
            logger.debug("Skipping %s: static asset", request.url)
            return False

        if self._whitelist is not None and not any(
            self._matches_url(pattern, request) for pattern in self._whitelist
        ):
            logger.debug("Skipping %s: not whitelisted", request.url)
            return False

        if self._blacklist is not None and any(
            self._matches_url(pattern, request) or self._matches_referer(pattern, request)
            for pattern in self._blacklist
        ):
            logger.debug("Skipping %s: blacklisted url or referer", request.url)
            return False

        return wants_snapshot

    def is_crawler(self, user_agent: str) -> bool:
        agent = user_agent.lower()
        return any(crawler in agent for crawler in self._crawler_user_agents)

    def is_static_asset(self, path: str) -> bool:
        return path.lower().endswith(self._extensions_to_ignore)

    @staticmethod
    def _matches_url(pattern: re.Pattern[str], request: RequestDescriptor) -> bool:
        # Full href first, then the origin-relative form (/path?query).
        return bool(pattern.search(request.url) or pattern.search(request.path_with_query))

    @staticmethod
    def _matches_referer(pattern: re.Pattern[str], request: RequestDescriptor) -> bool:
        referer = request.referer
        return bool(referer and pattern.search(referer))
