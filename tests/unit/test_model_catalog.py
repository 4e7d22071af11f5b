"""Unit tests for model display helpers and ModelRegistry."""

import json

import httpx
import pytest
import pytest_check as check

from highway_assist.llm import LLMConfig, ModelRegistry, OllamaClient, describe_model, format_model_name
from highway_assist.llm.model_catalog import DEFAULT_DESCRIPTION
from tests.fakes import OLLAMA_URL


class TestFormatModelName:
    """Tests for display names."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("llama2:13b", "Llama2"),
            ("library/neural-chat:latest", "Neural Chat"),
            ("codellama", "Codellama"),
            ("dolphin_mixtral:8x7b", "Dolphin Mixtral"),
        ],
    )
    def test_format(self, name: str, expected: str) -> None:
        assert format_model_name(name) == expected


class TestDescribeModel:
    """Tests for model descriptions."""

    def test_llama2_sizes(self) -> None:
        check.is_in("13B", describe_model("llama2:13b"))
        check.is_in("70B", describe_model("llama2:70b"))
        check.equal(describe_model("llama2:7b"), "Fast and efficient general-purpose language model")

    def test_known_families(self) -> None:
        check.is_in("coding", describe_model("codellama:7b"))
        check.is_in("multilingual", describe_model("qwen:14b"))
        check.is_in("conversational", describe_model("neural-chat:7b"))

    def test_unknown_model(self) -> None:
        assert describe_model("phi3:mini") == DEFAULT_DESCRIPTION


def registry_client(handler, default_model: str | None = None) -> OllamaClient:
    return OllamaClient(
        config=LLMConfig(base_url=OLLAMA_URL, default_model=default_model),
        transport=httpx.MockTransport(handler),
    )


class TestModelRegistry:
    """Tests for startup health and model loading."""

    async def test_refresh_loads_models(self, ollama_handler) -> None:
        async with registry_client(ollama_handler) as client:
            registry = ModelRegistry(client)

            healthy = await registry.refresh()

        check.is_true(healthy)
        check.is_none(registry.error)
        check.equal([o.name for o in registry.options], ["llama2:13b", "codellama:7b"])
        check.equal(registry.options[1].display_name, "Codellama")
        check.equal(registry.default_model(), "llama2:13b")

    async def test_configured_default_wins_when_installed(self, ollama_handler) -> None:
        async with registry_client(ollama_handler, default_model="codellama:7b") as client:
            registry = ModelRegistry(client)
            await registry.refresh()

        assert registry.default_model() == "codellama:7b"

    async def test_configured_default_ignored_when_missing(self, ollama_handler) -> None:
        async with registry_client(ollama_handler, default_model="mistral:7b") as client:
            registry = ModelRegistry(client)
            await registry.refresh()

        assert registry.default_model() == "llama2:13b"

    async def test_unreachable_server(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with registry_client(handler) as client:
            registry = ModelRegistry(client)
            healthy = await registry.refresh()

        check.is_false(healthy)
        check.equal(registry.models, [])
        check.equal(registry.error, "Ollama server is not reachable")
        check.is_none(registry.default_model())

    async def test_no_models_installed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"models": []})

        async with registry_client(handler) as client:
            registry = ModelRegistry(client)
            healthy = await registry.refresh()

        check.is_true(healthy)
        check.equal(registry.error, "No models installed on the Ollama server")

    async def test_check_model_records_outcome(self, ollama_handler) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/generate":
                model = json.loads(request.content)["model"]
                if model == "codellama:7b":
                    return httpx.Response(500, json={"error": "failed to load model"})
                return httpx.Response(200, json={"response": "Hi", "done": True})
            return ollama_handler(request)

        async with registry_client(handler) as client:
            registry = ModelRegistry(client)
            await registry.refresh()

            check.is_true(await registry.check_model("llama2:13b"))
            check.is_false(await registry.check_model("codellama:7b"))

        check.equal(registry.working, {"llama2:13b": True, "codellama:7b": False})

    async def test_refresh_forgets_uninstalled_models(self, ollama_handler) -> None:
        async with registry_client(ollama_handler) as client:
            registry = ModelRegistry(client)
            registry.working = {"llama2:13b": True, "mistral:7b": True}

            await registry.refresh()

        assert registry.working == {"llama2:13b": True}
