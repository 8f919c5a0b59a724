import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import requests

from namesplice.core.config.settings import Settings, settings as default_settings
from ..domain.interfaces import IVariantProbe

logger = logging.getLogger(__name__)


class RequestsVariantProbe(IVariantProbe):
    """
    HEAD-based existence check for rendered variants.
    file:// and bare paths are checked on disk instead.
    """

    def __init__(self, config: Settings = default_settings, session: Optional[requests.Session] = None):
        self.timeout = config.VARIANT_PROBE_TIMEOUT_SECONDS
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def exists(self, url: str) -> bool:
        parsed = urlparse(url)
        if parsed.scheme in ("", "file"):
            return Path(unquote(parsed.path)).exists()

        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.warning(f"Variant probe for {url} failed: {e}")
            return False
        return response.ok
