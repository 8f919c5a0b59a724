# File: namesplice/core/model_lifecycle/orchestrator.py

import gc
import logging
from threading import Lock
from typing import Any, Callable, Optional

import torch

from .types import ModelType

logger = logging.getLogger(__name__)


class ModelOrchestrator:
    """
    Singleton Resource Manager.
    Keeps at most one local speech model resident; a request for a different
    model (or a different size of the same one) evicts the current one first.
    """
    _instance = None
    _lock = Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super(ModelOrchestrator, cls).__new__(cls)
                cls._instance._current_key = None
                cls._instance._loaded_model = None
        return cls._instance

    def request_model(self, model_type: ModelType, loader_func: Callable[[], Any], variant: str = "") -> Any:
        """
        Returns the requested model, loading it if needed.

        Args:
            model_type: The enum identifier for the model family.
            loader_func: Returns the loaded model object. Only called on a miss.
            variant: Distinguishes sizes of the same family (e.g. 'base' vs 'large-v3').
        """
        key = (model_type, variant)
        with self._lock:
            if self._current_key == key and self._loaded_model is not None:
                return self._loaded_model

            if self._loaded_model is not None:
                self._unload()

            logger.info(f"Orchestrator: Loading {model_type.value}:{variant or 'default'}...")
            try:
                self._loaded_model = loader_func()
            except Exception as e:
                logger.error(f"Failed to load {model_type.value}:{variant}: {e}")
                raise
            self._current_key = key
            return self._loaded_model

    def release(self) -> None:
        """Frees whatever is loaded. Safe to call when nothing is."""
        with self._lock:
            if self._loaded_model is not None:
                self._unload()

    def _unload(self):
        logger.info(f"Orchestrator: Unloading {self._current_key}...")
        self._loaded_model = None
        self._current_key = None

        gc.collect()
        if torch.cuda.is_available():
            torch.cuda.empty_cache()

    def get_current_model_type(self) -> Optional[ModelType]:
        """Helper for testing state."""
        return self._current_key[0] if self._current_key else None
