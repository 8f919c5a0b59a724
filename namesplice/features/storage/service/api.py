import re
from typing import Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from ..data.local_fs import LocalBlobStore
from ..domain.interfaces import IBlobStore

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")

_store: Optional[IBlobStore] = None


def get_blob_store(config: Settings = default_settings) -> IBlobStore:
    """Process-wide blob store. Tests construct their own LocalBlobStore instead."""
    global _store
    if _store is None:
        _store = LocalBlobStore(config=config)
    return _store


def clip_storage_key(prospect_id: str, first_name: str) -> str:
    """
    Key for a prospect's synthesized name clip.
    e.g. ("p-1", "Mary Ann") -> "generated_p-1_MaryAnn.mp3"
    """
    return f"generated_{prospect_id}_{_NON_ALNUM.sub('', first_name)}.mp3"
