"""Tests for crisis phrase interception."""

from __future__ import annotations

import pytest

from alliswell.domain.reference_data import CRISIS_PHRASES, CRISIS_SUPPORT_MESSAGE
from alliswell.domain.services.crisis import CrisisInterceptor


@pytest.fixture()
def interceptor() -> CrisisInterceptor:
    return CrisisInterceptor()


class TestCrisisInterceptor:
    @pytest.mark.parametrize("phrase", CRISIS_PHRASES)
    def test_every_phrase_intercepts(self, interceptor: CrisisInterceptor, phrase: str) -> None:
        assert interceptor.is_crisis(f"lately {phrase} and I don't know why")

    def test_match_is_case_insensitive(self, interceptor: CrisisInterceptor) -> None:
        check = interceptor.check("Sometimes I WANT TO DIE")

        assert check.intercepted
        assert check.matched_phrases == ("want to die",)

    def test_ordinary_message_passes(self, interceptor: CrisisInterceptor) -> None:
        check = interceptor.check("I had a stressful day at work")

        assert not check.intercepted
        assert check.matched_phrases == ()

    def test_negation_is_still_intercepted(self, interceptor: CrisisInterceptor) -> None:
        assert interceptor.is_crisis("I would never kill myself")

    def test_custom_phrases(self) -> None:
        interceptor = CrisisInterceptor(["  Give Up  ", ""])

        assert interceptor.phrases == ("give up",)
        assert interceptor.is_crisis("I just want to give up")
        assert not interceptor.is_crisis("want to die")

    def test_response_carries_message_and_resources(self, interceptor: CrisisInterceptor) -> None:
        response = interceptor.response().to_dict()

        assert response["message"] == CRISIS_SUPPORT_MESSAGE
        assert any("988" in resource["contact"] for resource in response["resources"])
        assert len(response["resources"]) == 3
