"""Tests for the embedding providers."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from feed_service.config import FeedConfig
from feed_service.exceptions import EmbeddingError
from feed_service.services.embedding_service import (
    EmbeddingProvider,
    LocalEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)


def _openai_response(vector):
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)])


@patch("feed_service.services.embedding_service.OpenAI")
def test_openai_provider_embeds_text(openai_cls):
    openai_cls.return_value.embeddings.create.return_value = _openai_response([0.1, 0.2, 0.3])
    provider = OpenAIEmbeddingProvider(api_key="sk-test", model="text-embedding-ada-002", timeout=2.0)

    assert provider.embed("  red sneakers ") == [0.1, 0.2, 0.3]

    openai_cls.assert_called_once_with(api_key="sk-test", timeout=2.0, max_retries=0)
    openai_cls.return_value.embeddings.create.assert_called_once_with(
        model="text-embedding-ada-002", input="red sneakers"
    )


@patch("feed_service.services.embedding_service.OpenAI")
def test_client_is_created_once(openai_cls):
    openai_cls.return_value.embeddings.create.return_value = _openai_response([1.0])
    provider = OpenAIEmbeddingProvider(api_key="sk-test")

    provider.embed("a")
    provider.embed("b")

    assert openai_cls.call_count == 1


@patch("feed_service.services.embedding_service.OpenAI")
def test_blank_text_is_rejected_without_a_request(openai_cls):
    provider = OpenAIEmbeddingProvider(api_key="sk-test")

    with pytest.raises(EmbeddingError):
        provider.embed("   ")

    openai_cls.assert_not_called()


@patch("feed_service.services.embedding_service.OpenAI")
def test_provider_failure_is_wrapped(openai_cls):
    openai_cls.return_value.embeddings.create.side_effect = RuntimeError("rate limited")
    provider = OpenAIEmbeddingProvider(api_key="sk-test")

    with pytest.raises(EmbeddingError) as exc_info:
        provider.embed("boots")

    assert exc_info.value.step == "embed_query"
    assert exc_info.value.details["error_type"] == "RuntimeError"
    assert exc_info.value.status_code == 502


@pytest.mark.parametrize("vector", [[], [0.1, float("nan")], [[0.1], [0.2]], ["a", "b"]])
@patch("feed_service.services.embedding_service.OpenAI")
def test_unusable_vectors_are_rejected(openai_cls, vector):
    openai_cls.return_value.embeddings.create.return_value = _openai_response(vector)
    provider = OpenAIEmbeddingProvider(api_key="sk-test")

    with pytest.raises(EmbeddingError):
        provider.embed("boots")


@patch("feed_service.services.embedding_service.OpenAI")
def test_dimension_mismatch_is_rejected(openai_cls):
    openai_cls.return_value.embeddings.create.return_value = _openai_response([0.1, 0.2])
    provider = OpenAIEmbeddingProvider(api_key="sk-test", dimensions=3)

    with pytest.raises(EmbeddingError, match="expected 3"):
        provider.embed("boots")


def test_local_provider_normalizes_and_returns_list():
    provider = LocalEmbeddingProvider(model_name="test-model", dimensions=2)
    provider._model = MagicMock()
    provider._model.encode.return_value = np.array([0.6, 0.8], dtype=np.float32)

    vector = provider.embed("boots")

    assert vector == pytest.approx([0.6, 0.8])
    assert isinstance(vector, list)
    provider._model.encode.assert_called_once_with("boots", normalize_embeddings=True)


def test_factory_selects_provider_from_config():
    openai_provider = create_embedding_provider(FeedConfig(openai_api_key="sk-test", embedding_dimensions=1536))
    local_provider = create_embedding_provider(FeedConfig(embedding_provider="local"))

    assert isinstance(openai_provider, OpenAIEmbeddingProvider)
    assert openai_provider.dimensions == 1536
    assert isinstance(local_provider, LocalEmbeddingProvider)
    assert local_provider.model_name == "BAAI/bge-base-en"


def test_base_provider_cannot_be_instantiated():
    with pytest.raises(TypeError):
        EmbeddingProvider()
