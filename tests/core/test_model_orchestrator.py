from unittest.mock import MagicMock

import pytest

from namesplice.core.model_lifecycle.orchestrator import ModelOrchestrator
from namesplice.core.model_lifecycle.types import ModelType


@pytest.fixture
def orchestrator():
    orch = ModelOrchestrator()
    orch.release()
    yield orch
    orch.release()


def test_is_a_singleton():
    assert ModelOrchestrator() is ModelOrchestrator()


def test_model_is_loaded_once_per_variant(orchestrator):
    loader = MagicMock(return_value="whisper-base")

    first = orchestrator.request_model(ModelType.WHISPER, loader, variant="base")
    second = orchestrator.request_model(ModelType.WHISPER, loader, variant="base")

    assert first == second == "whisper-base"
    loader.assert_called_once()
    assert orchestrator.get_current_model_type() == ModelType.WHISPER


def test_switching_variant_evicts_current_model(orchestrator):
    base_loader = MagicMock(return_value="base")
    large_loader = MagicMock(return_value="large")

    orchestrator.request_model(ModelType.WHISPER, base_loader, variant="base")
    assert orchestrator.request_model(ModelType.WHISPER, large_loader, variant="large-v3") == "large"

    # Asking for base again must reload it
    orchestrator.request_model(ModelType.WHISPER, base_loader, variant="base")
    assert base_loader.call_count == 2


def test_release_clears_state(orchestrator):
    orchestrator.request_model(ModelType.WHISPER, lambda: object(), variant="tiny")
    orchestrator.release()
    assert orchestrator.get_current_model_type() is None


def test_loader_failure_propagates(orchestrator):
    def broken():
        raise RuntimeError("CUDA out of memory")

    with pytest.raises(RuntimeError):
        orchestrator.request_model(ModelType.WHISPER, broken)
    assert orchestrator.get_current_model_type() is None
