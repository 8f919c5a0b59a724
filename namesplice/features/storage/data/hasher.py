import hashlib
from ..domain.interfaces import IKeyHasher


class SHA256KeyHasher(IKeyHasher):
    def digest(self, key: str) -> str:
        return hashlib.sha256(key.encode("utf-8")).hexdigest()
