"""
Unit tests for HTTP provider adapters: Hugging Face and Ollama embeddings, OpenAI answers.
"""

from unittest.mock import Mock
import pytest
import requests

from docvec.domain.errors import DependencyTimeoutError, EmbeddingUnavailableError, GenerationError
from docvec.infrastructure.huggingface.client import HuggingFaceEmbeddingService
from docvec.infrastructure.ollama.client import OllamaEmbeddingService
from docvec.infrastructure.openai.client import OpenAIAnswerGenerator, build_answer_generator
from docvec.infrastructure.providers import build_embedding_service
from docvec.infrastructure.vectors import first_vector, parse_vector


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


class TestVectorParsing:
    """Test provider vector parsing and reduction."""

    def test_flat_vector(self):
        assert parse_vector(first_vector([0.1, 2, -3.5])) == [0.1, 2.0, -3.5]

    def test_first_of_many(self):
        """Multi-vector responses keep only the first vector."""
        assert first_vector([[1.0, 2.0], [3.0, 4.0]]) == [1.0, 2.0]

    def test_token_level_nesting(self):
        assert first_vector([[[5.0, 6.0], [7.0, 8.0]]]) == [5.0, 6.0]

    @pytest.mark.parametrize("raw", [[], None, "nope", [1.0, "x"], [1.0, None], [True, 1.0], [float("nan")], {"a": 1}])
    def test_unusable_vectors(self, raw):
        """Anything but a non-empty list of finite numbers fails as a whole."""
        with pytest.raises(EmbeddingUnavailableError):
            parse_vector(raw)


class TestHuggingFaceEmbeddings:
    """Test HuggingFaceEmbeddingService."""

    def test_embed_posts_inputs(self, session, make_response, clean_environment):
        """Text is sent as 'inputs' to the model URL with the bearer token."""
        session.post.return_value = make_response(200, [[0.1, 0.2, 0.3], [9.0, 9.0, 9.0]])
        svc = HuggingFaceEmbeddingService(session=session, token="hf_secret")

        vec = svc.embed("some text")

        assert vec.values == [0.1, 0.2, 0.3]
        assert vec.dim == 3
        url = session.post.call_args[0][0]
        kwargs = session.post.call_args[1]
        assert url == "https://api-inference.huggingface.co/models/sentence-transformers/all-MiniLM-L6-v2"
        assert kwargs["json"] == {"inputs": "some text"}
        assert kwargs["headers"] == {"Authorization": "Bearer hf_secret"}
        assert kwargs["timeout"] == 15.0

    def test_model_and_url_from_env(self, session, make_response, clean_environment, monkeypatch):
        monkeypatch.setenv("HF_API_URL", "http://hf.local/models/")
        monkeypatch.setenv("EMBED_MODEL", "org/model")
        session.post.return_value = make_response(200, [1.0])
        HuggingFaceEmbeddingService(session=session, token="").embed("x")
        assert session.post.call_args[0][0] == "http://hf.local/models/org/model"
        assert session.post.call_args[1]["headers"] == {}

    def test_error_body(self, session, make_response, clean_environment):
        """An error object instead of a vector is EmbeddingUnavailableError."""
        session.post.return_value = make_response(200, {"error": "Model is loading"})
        with pytest.raises(EmbeddingUnavailableError, match="Model is loading"):
            HuggingFaceEmbeddingService(session=session, token="t").embed("x")

    def test_http_error(self, session, make_response, clean_environment):
        session.post.return_value = make_response(503, {"error": "busy"})
        with pytest.raises(EmbeddingUnavailableError):
            HuggingFaceEmbeddingService(session=session, token="t").embed("x")

    def test_connection_error(self, session, clean_environment):
        session.post.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(EmbeddingUnavailableError):
            HuggingFaceEmbeddingService(session=session, token="t").embed("x")

    def test_timeout(self, session, clean_environment, monkeypatch):
        """Timeouts use DOCVEC_HTTP_TIMEOUT and surface as DependencyTimeoutError."""
        monkeypatch.setenv("DOCVEC_HTTP_TIMEOUT", "2.5")
        session.post.side_effect = requests.Timeout("slow")
        with pytest.raises(DependencyTimeoutError) as exc:
            HuggingFaceEmbeddingService(session=session, token="t").embed("x")
        assert exc.value.dependency == "huggingface"
        assert exc.value.timeout == 2.5

    def test_get_dimension_probes(self, session, make_response, clean_environment):
        session.post.return_value = make_response(200, [0.0] * 384)
        assert HuggingFaceEmbeddingService(session=session, token="t").get_dimension() == 384


class TestOllamaEmbeddings:
    """Test OllamaEmbeddingService."""

    def test_embed(self, session, make_response, clean_environment):
        session.post.return_value = make_response(200, {"embedding": [1, 2, 3]})
        vec = OllamaEmbeddingService(session=session).embed("hello")
        assert vec.values == [1.0, 2.0, 3.0]
        assert session.post.call_args[0][0] == "http://localhost:11434/api/embeddings"
        assert session.post.call_args[1]["json"] == {"model": "all-minilm", "prompt": "hello"}

    def test_default_model_ignores_provider_setting(self, session, make_response, clean_environment, monkeypatch):
        """A directly built Ollama adapter uses its own default model whatever EMBED_PROVIDER says."""
        monkeypatch.setenv("EMBED_PROVIDER", "huggingface")
        session.post.return_value = make_response(200, {"embedding": [1.0]})
        OllamaEmbeddingService(session=session).embed("hello")
        assert session.post.call_args[1]["json"]["model"] == "all-minilm"

    def test_model_from_env(self, session, make_response, clean_environment, monkeypatch):
        monkeypatch.setenv("EMBED_MODEL", "nomic-embed-text")
        session.post.return_value = make_response(200, {"embedding": [1.0]})
        OllamaEmbeddingService(session=session).embed("hello")
        assert session.post.call_args[1]["json"]["model"] == "nomic-embed-text"

    def test_missing_embedding_field(self, session, make_response, clean_environment):
        session.post.return_value = make_response(200, {"error": "model not found"})
        with pytest.raises(EmbeddingUnavailableError):
            OllamaEmbeddingService(session=session).embed("hello")


class TestProviderSelection:
    """Test build_embedding_service."""

    def test_default_is_huggingface(self, clean_environment):
        assert isinstance(build_embedding_service(), HuggingFaceEmbeddingService)

    def test_ollama(self, clean_environment, monkeypatch):
        monkeypatch.setenv("EMBED_PROVIDER", "Ollama")
        assert isinstance(build_embedding_service(), OllamaEmbeddingService)

    def test_unknown(self, clean_environment, monkeypatch):
        monkeypatch.setenv("EMBED_PROVIDER", "word2vec")
        with pytest.raises(ValueError):
            build_embedding_service()


class TestOpenAIAnswerGenerator:
    """Test OpenAIAnswerGenerator."""

    def test_generate(self, session, make_response, clean_environment):
        """The document and question are sent as one user message."""
        session.post.return_value = make_response(200, {"choices": [{"message": {"content": "42"}}]})
        answer = OpenAIAnswerGenerator(api_key="sk-test", session=session).generate("doc body", "what?")

        assert answer == "42"
        assert session.post.call_args[0][0] == "https://api.openai.com/v1/chat/completions"
        body = session.post.call_args[1]["json"]
        assert body["model"] == "gpt-3.5-turbo"
        assert body["messages"] == [{"role": "user", "content": "Based on the document: doc body, what?"}]
        assert session.post.call_args[1]["headers"] == {"Authorization": "Bearer sk-test"}

    @pytest.mark.parametrize("payload", [{}, {"choices": []}, {"choices": [{"message": {}}]}, {"choices": [{"message": {"content": None}}]}])
    def test_malformed_response(self, session, make_response, clean_environment, payload):
        session.post.return_value = make_response(200, payload)
        with pytest.raises(GenerationError):
            OpenAIAnswerGenerator(api_key="k", session=session).generate("c", "q")

    def test_http_error(self, session, make_response, clean_environment):
        session.post.return_value = make_response(429, {})
        with pytest.raises(GenerationError):
            OpenAIAnswerGenerator(api_key="k", session=session).generate("c", "q")

    def test_timeout(self, session, clean_environment):
        session.post.side_effect = requests.Timeout()
        with pytest.raises(DependencyTimeoutError):
            OpenAIAnswerGenerator(api_key="k", session=session).generate("c", "q")

    def test_build_without_key(self, clean_environment):
        """No API key means no generator."""
        assert build_answer_generator() is None

    def test_build_with_key(self, clean_environment, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-x")
        assert isinstance(build_answer_generator(), OpenAIAnswerGenerator)
