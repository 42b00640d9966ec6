"""Tests for the chat orchestrator."""

import pytest

from llm.orchestrator import BothProvidersFailedError, ChatOrchestrator, ChatRequest
from llm.prompt_templates import Persona
from retrieval.context_enricher import EnrichmentResult


class FakeEnricher:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def enrich(self, prompt, history_text, persona):
        self.calls.append((prompt, history_text, persona))
        return self.result


def _orchestrator(primary, secondary=None, enricher=None, sleep=None):
    return ChatOrchestrator(
        primary_llm=primary,
        secondary_llm=secondary,
        context_enricher=enricher,
        sleep=sleep,
    )


class TestGenerate:
    @pytest.mark.asyncio
    async def test_primary_with_title(self, fake_llm, recording_sleep):
        primary = fake_llm(["  Here is your answer.  ", "Card Replacement"])
        orch = _orchestrator(primary, sleep=recording_sleep)

        result = await orch.generate("I lost my card", "", "", True, Persona.DEFAULT)

        assert result.response_text == "Here is your answer."
        assert result.title == "Card Replacement"
        assert result.provider == "primary"
        assert primary.calls[0]["system"] == "You are a helpful assistant."
        assert primary.calls[0]["max_tokens"] == 150
        assert primary.calls[1]["max_tokens"] == 50
        assert '"I lost my card"' in primary.calls[1]["prompt"]

    @pytest.mark.asyncio
    async def test_support_prompt_carries_intentions(self, fake_llm):
        primary = fake_llm(["ok"])
        orch = _orchestrator(primary)

        await orch.generate("q", "user: hi", "Relevant intentions: card_arrival", False, "support")

        prompt = primary.calls[0]["prompt"]
        assert 'Predicted intentions: "Relevant intentions: card_arrival"' in prompt
        assert primary.calls[0]["system"] == "You are a customer support assistant for a bank."

    @pytest.mark.asyncio
    async def test_interest_rate_only_for_financial_planning(self, fake_llm):
        primary = fake_llm(["a", "b"])
        orch = _orchestrator(primary)

        await orch.generate("q", "", "", False, Persona.FINANCIAL_PLANNING, interest_rate=5.25)
        await orch.generate("q", "", "", False, Persona.DEFAULT, interest_rate=5.25)

        assert primary.calls[0]["prompt"].endswith("\n\nCalculated Required Interest Rate: 5.25%")
        assert "Interest Rate" not in primary.calls[1]["prompt"]

    @pytest.mark.asyncio
    async def test_fallback_after_retries(self, fake_llm, recording_sleep):
        primary = fake_llm(always_fail=True)
        secondary = fake_llm(["Backup answer"])
        orch = _orchestrator(primary, secondary, sleep=recording_sleep)

        result = await orch.generate(
            "q", "", "", True, Persona.FINANCIAL_PLANNING, interest_rate=4.0
        )

        assert result.response_text == "Backup answer"
        assert result.title is None
        assert result.provider == "secondary"
        assert len(primary.calls) == 4
        assert recording_sleep.delays == [1.0, 2.0, 4.0]
        assert len(secondary.calls) == 1
        assert "Calculated Required Interest Rate" not in secondary.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_both_providers_fail(self, fake_llm, recording_sleep):
        orch = _orchestrator(fake_llm(always_fail=True), fake_llm(always_fail=True), sleep=recording_sleep)
        with pytest.raises(BothProvidersFailedError):
            await orch.generate("q", "", "", False, Persona.DEFAULT)

    @pytest.mark.asyncio
    async def test_no_secondary_configured(self, fake_llm, recording_sleep):
        orch = _orchestrator(fake_llm(always_fail=True), sleep=recording_sleep)
        with pytest.raises(BothProvidersFailedError):
            await orch.generate("q", "", "", False, Persona.DEFAULT)

    @pytest.mark.asyncio
    async def test_title_failure_defaults(self, fake_llm):
        primary = fake_llm(["answer", RuntimeError("title call failed")])
        result = await _orchestrator(primary).generate("q", "", "", True, Persona.DEFAULT)

        assert result.response_text == "answer"
        assert result.title == "New Chat"
        assert len(primary.calls) == 2

    @pytest.mark.asyncio
    async def test_empty_title_defaults(self, fake_llm):
        primary = fake_llm(["answer", "   "])
        result = await _orchestrator(primary).generate("q", "", "", True, Persona.DEFAULT)
        assert result.title == "New Chat"


class TestProcess:
    @pytest.mark.asyncio
    async def test_market_text_is_prepended(self, fake_llm):
        primary = fake_llm(["Looks strong."])
        enricher = FakeEnricher(EnrichmentResult(
            updated_history_text="user: hi\nMARKET",
            market_text="MARKET",
        ))
        orch = _orchestrator(primary, enricher=enricher)

        response = await orch.process(ChatRequest(prompt="MSFT?", chatbot="stock-market", context="user: hi"))

        assert response.message == "MARKET\n\nLooks strong."
        assert response.persona == "stock-market"
        assert 'Historical context: "user: hi\nMARKET"' in primary.calls[0]["prompt"]
        assert enricher.calls[0][1] == "user: hi"

    @pytest.mark.asyncio
    async def test_unknown_chatbot_uses_default_persona(self, fake_llm):
        primary = fake_llm(["hello"])
        response = await _orchestrator(primary).process(ChatRequest(prompt="hi", chatbot="mystery-bot"))

        assert response.persona == "default"
        assert response.title is None
        assert response.to_dict()["message"] == "hello"
