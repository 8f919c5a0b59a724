# File: namesplice/features/delivery/service/selector.py
import logging
import posixpath
from typing import Iterable, Optional
from urllib.parse import urlsplit, urlunsplit

from namesplice.core.config.settings import Settings, settings as default_settings
from ..data.variant_probe import RequestsVariantProbe
from ..domain.interfaces import IVariantProbe
from ..domain.quality import get_tier

logger = logging.getLogger(__name__)


def resolve_variant(base_ref: str, tier: str) -> str:
    """
    Inserts the tier before the file extension of the last path segment.
    e.g. ("videos/base-video.mp4", "480p") -> "videos/base-video_480p.mp4"

    Query strings and fragments are kept. A segment without an extension
    gets the suffix appended. No existence check is made here.

    Raises:
        ValidationError: tier is not one of the fixed quality tiers.
    """
    tier_name = get_tier(tier).name
    if not base_ref:
        return base_ref

    scheme, netloc, path, query, fragment = urlsplit(base_ref)
    head, segment = posixpath.split(path)
    stem, ext = posixpath.splitext(segment)

    variant_segment = f"{stem}_{tier_name}{ext}"
    variant_path = posixpath.join(head, variant_segment) if head else variant_segment
    return urlunsplit((scheme, netloc, variant_path, query, fragment))


def resolve_playable_variant(base_ref: str,
                             tier: str,
                             probe: Optional[IVariantProbe] = None,
                             verify: Optional[bool] = None,
                             config: Settings = default_settings) -> str:
    """
    Variant URL for the tier, falling back to the base reference when the
    variant cannot be confirmed to exist. Verification is on when verify is
    True, or when it is None and VERIFY_VARIANTS is set.
    """
    url = resolve_variant(base_ref, tier)
    should_verify = config.VERIFY_VARIANTS if verify is None else verify
    if not should_verify:
        return url

    probe = probe or RequestsVariantProbe(config)
    if probe.exists(url):
        return url

    logger.warning(f"No {tier} variant at {url}, serving base reference")
    return base_ref


def best_available_variant(base_ref: str,
                           preferred_tiers: Iterable[str],
                           probe: Optional[IVariantProbe] = None,
                           config: Settings = default_settings) -> str:
    """Tries tiers in order and returns the first that exists, else the base reference."""
    probe = probe or RequestsVariantProbe(config)
    for tier in preferred_tiers:
        url = resolve_variant(base_ref, tier)
        if probe.exists(url):
            return url

    logger.warning(f"No rendered variant found for {base_ref}, serving base reference")
    return base_ref
