from abc import ABC, abstractmethod


class IKeyHasher(ABC):
    @abstractmethod
    def digest(self, key: str) -> str:
        """Returns a hex digest used to shard keys across directories."""
        pass


class IBlobStore(ABC):
    """
    Opaque key -> URL storage for generated artifacts.
    Keys are caller-chosen; writing an existing key replaces its content.
    """

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """
        Stores the bytes under the key.
        Returns: A URL from which the content can be fetched.
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def url_for(self, key: str) -> str:
        pass
