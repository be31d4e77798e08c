"""
Tests for tag parsing and TaggingService.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from broker_backend.services.tagging_service import (
    ALLOWED_TAGS,
    TaggingService,
    build_tag_prompt,
    parse_tags,
)


class TestParseTags:

    def test_unlisted_tag_is_dropped(self):
        assert parse_tags('["auto","vida","desporto"]') == ["auto", "vida"]

    def test_object_with_tags(self):
        assert parse_tags('{"tags": ["Saude", " empresas "]}') == ["saude", "empresas"]

    def test_code_fence_is_removed(self):
        content = 'Aqui está:\n```json\n{"tags": ["frota", "auto"]}\n```'

        assert parse_tags(content) == ["frota", "auto"]

    def test_json_prefix_is_removed(self):
        assert parse_tags('json: ["sinistros", "local"]') == ["sinistros", "local"]

    def test_repeats_removed_and_capped_at_four(self):
        content = '["auto","Auto","vida","saude","frota","local"]'

        assert parse_tags(content) == ["auto", "vida", "saude", "frota"]

    @pytest.mark.parametrize("content", ["", "não sei", '{"labels": ["auto"]}', '"auto"', '["desporto"]'])
    def test_nothing_usable_gives_empty_list(self, content):
        assert parse_tags(content) == []


class TestPrompt:

    def test_lists_the_whole_vocabulary(self):
        prompt = build_tag_prompt("Título", "Resumo")

        assert ", ".join(ALLOWED_TAGS) in prompt
        assert "Região" not in prompt

    def test_region_line_only_when_given(self):
        assert 'Região: "local"' in build_tag_prompt("Título", "Resumo", "local")


class TestGenerateTags:

    @pytest.fixture
    def llm(self):
        with patch("broker_backend.services.tagging_service.ChatOpenAI") as chat_cls:
            yield chat_cls.return_value

    @pytest.mark.asyncio
    async def test_returns_filtered_tags(self, llm, settings_factory):
        llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content='{"tags": ["auto", "vida", "desporto"]}'))
        service = TaggingService(settings_factory(OPENAI_API_KEY="sk-test"))

        tags = await service.generate_tags("n1", {"title": "Seguros", "summary": "Resumo", "region": "nacional"})

        assert tags == ["auto", "vida"]

    @pytest.mark.asyncio
    async def test_empty_filtered_set_gives_none(self, llm, settings_factory):
        llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content='["desporto", "cinema"]'))
        service = TaggingService(settings_factory(OPENAI_API_KEY="sk-test"))

        assert await service.generate_tags("n1", {"title": "Futebol"}) is None

    @pytest.mark.asyncio
    async def test_document_without_text_is_skipped(self, llm, settings_factory):
        llm.ainvoke = AsyncMock()
        service = TaggingService(settings_factory(OPENAI_API_KEY="sk-test"))

        assert await service.generate_tags("n1", {"region": "local"}) is None
        llm.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_api_failure_propagates(self, llm, settings_factory):
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("500 from provider"))
        service = TaggingService(settings_factory(OPENAI_API_KEY="sk-test"))

        with pytest.raises(RuntimeError):
            await service.generate_tags("n1", {"title": "Seguros"})
