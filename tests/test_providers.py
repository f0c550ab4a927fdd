import unittest
from types import SimpleNamespace
from unittest import mock

import requests

from policypulse.config.settings import PipelineConfig
from policypulse.errors import EmptyProviderResponse, ProviderError
from policypulse.providers.factory import build_classifier_provider, build_embedding_provider
from policypulse.providers.ollama import OllamaClient
from policypulse.providers.openai_provider import OpenAIProvider
from policypulse.providers.voyage_provider import VoyageEmbeddingProvider


def _http(status=200, payload=None):
    resp = mock.Mock()
    resp.status_code = status
    resp.json.return_value = payload or {}
    resp.text = str(payload)
    return resp


class TestOllamaClient(unittest.TestCase):
    def test_embed_reads_first_vector(self):
        session = mock.Mock()
        session.post.return_value = _http(payload={"embeddings": [[1, 2, 3]]})
        client = OllamaClient(model="embeddinggemma", base_url="http://ollama:11434/", session=session)
        self.assertEqual(client.embed("hello"), [1.0, 2.0, 3.0])
        url = session.post.call_args.args[0]
        self.assertEqual(url, "http://ollama:11434/api/embed")
        self.assertEqual(session.post.call_args.kwargs["json"], {"model": "embeddinggemma", "input": "hello"})

    def test_chat_json_mode_sets_format(self):
        session = mock.Mock()
        session.post.return_value = _http(payload={"message": {"content": ' {"is_interesting": true} '}})
        client = OllamaClient(model="gemma3", session=session)
        out = client.complete("sys", "user", json_mode=True)
        self.assertEqual(out, '{"is_interesting": true}')
        body = session.post.call_args.kwargs["json"]
        self.assertEqual(body["format"], "json")
        self.assertFalse(body["stream"])
        self.assertEqual(body["messages"][0], {"role": "system", "content": "sys"})

    def test_empty_embedding_raises(self):
        session = mock.Mock()
        session.post.return_value = _http(payload={"embeddings": []})
        with self.assertRaises(EmptyProviderResponse):
            OllamaClient(model="m", session=session).embed("x")

    def test_client_error_is_not_retried(self):
        session = mock.Mock()
        session.post.return_value = _http(status=404, payload={"error": "model not found"})
        with self.assertRaises(ProviderError):
            OllamaClient(model="m", max_retries=3, session=session).complete("s", "u")
        self.assertEqual(session.post.call_count, 1)

    def test_timeout_becomes_provider_error(self):
        session = mock.Mock()
        session.post.side_effect = requests.exceptions.Timeout("slow")
        with self.assertRaises(ProviderError):
            OllamaClient(model="m", max_retries=0, session=session).embed("x")

    def test_transient_error_is_retried(self):
        session = mock.Mock()
        session.post.side_effect = [_http(status=503), _http(payload={"embeddings": [[0.5]]})]
        with mock.patch("time.sleep"):
            vec = OllamaClient(model="m", max_retries=1, session=session).embed("x")
        self.assertEqual(vec, [0.5])
        self.assertEqual(session.post.call_count, 2)


class TestOpenAIProvider(unittest.TestCase):
    def _client(self):
        client = mock.Mock()
        client.embeddings.create.return_value = SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=" answer "))]
        )
        return client

    def test_embed(self):
        client = self._client()
        p = OpenAIProvider("text-embedding-3-small", api_key="k", client=client)
        self.assertEqual(p.embed("hi"), [0.1, 0.2])
        client.embeddings.create.assert_called_once_with(model="text-embedding-3-small", input=["hi"])

    def test_complete_json_mode(self):
        client = self._client()
        p = OpenAIProvider("gpt-4o-mini", api_key="k", client=client)
        self.assertEqual(p.complete("s", "u", json_mode=True), "answer")
        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})

    def test_empty_choice_raises(self):
        client = self._client()
        client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        with self.assertRaises(EmptyProviderResponse):
            OpenAIProvider("m", api_key="k", client=client).complete("s", "u")


class TestVoyageProvider(unittest.TestCase):
    def test_embed_wraps_errors(self):
        client = mock.Mock()
        client.embed.side_effect = RuntimeError("quota")
        with self.assertRaises(ProviderError):
            VoyageEmbeddingProvider("voyage-3", api_key="k", client=client).embed("x")

    def test_embed_returns_first_vector(self):
        client = mock.Mock()
        client.embed.return_value = SimpleNamespace(embeddings=[[1, 2]])
        self.assertEqual(VoyageEmbeddingProvider("voyage-3", api_key="k", client=client).embed("x"), [1.0, 2.0])


class TestProviderFactory(unittest.TestCase):
    def test_defaults_use_ollama(self):
        config = PipelineConfig()
        emb = build_embedding_provider(config)
        clf = build_classifier_provider(config)
        self.assertIsInstance(emb, OllamaClient)
        self.assertEqual(emb.model, "embeddinggemma")
        self.assertIsInstance(clf, OllamaClient)
        self.assertEqual(clf.model, "gemma3")

    def test_openai_selected(self):
        config = PipelineConfig(llm_provider="openai", classifier_model="gpt-4o-mini", openai_api_key="sk-test")
        clf = build_classifier_provider(config)
        self.assertIsInstance(clf, OpenAIProvider)
        self.assertEqual(clf.model, "gpt-4o-mini")


if __name__ == "__main__":
    unittest.main()
