import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import ValidationError
from ..domain.interfaces import IBlobStore, IKeyHasher
from .hasher import SHA256KeyHasher

logger = logging.getLogger(__name__)


class LocalBlobStore(IBlobStore):
    """
    Stores blobs on the local disk at: {root}/{first_2_chars_of_sha256(key)}/{key}
    Sharding keeps any one directory from accumulating thousands of clips.
    """

    def __init__(self,
                 root: Optional[Path] = None,
                 public_base_url: Optional[str] = None,
                 hasher: Optional[IKeyHasher] = None,
                 config: Settings = default_settings):
        self.root = Path(root) if root is not None else config.ARTIFACTS_DIR
        base = config.PUBLIC_BASE_URL if public_base_url is None else public_base_url
        self.public_base_url = base.rstrip("/")
        self.hasher = hasher or SHA256KeyHasher()

    def path_for(self, key: str) -> Path:
        _check_key(key)
        return self.root / self.hasher.digest(key)[:2] / key

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        destination = self.path_for(key)
        destination.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling temp file then rename, so readers never see a partial clip
        fd, tmp_name = tempfile.mkstemp(dir=destination.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, destination)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(f"Stored {len(data)} bytes ({content_type}) at {destination}")
        return self.url_for(key)

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return self.path_for(key).resolve().as_uri()


def _check_key(key: str) -> None:
    if not key or key.startswith(("/", "\\")) or ".." in Path(key).parts:
        raise ValidationError(f"Invalid storage key: {key!r}")
