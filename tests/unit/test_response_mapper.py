"""Unit tests for upstream response mapping."""

from datetime import datetime

import pytest

from gateway.core.errors import MalformedResponseError
from gateway.core.response_mapper import map_response


class TestMapResponse:

    def test_maps_first_choice(self, completion_payload):
        result = map_response(completion_payload)
        assert result.id == "abc123"
        assert result.message == "Hello there!"
        assert result.model == "deepseek-chat"
        assert result.finish_reason == "stop"

    def test_usage_copied(self, completion_payload):
        usage = map_response(completion_payload).usage
        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (9, 3, 12)

    def test_missing_usage_is_zero(self, completion_payload):
        del completion_payload["usage"]
        usage = map_response(completion_payload).usage.model_dump(by_alias=True)
        assert usage == {"promptTokens": 0, "completionTokens": 0, "totalTokens": 0}

    def test_null_usage_is_zero(self, completion_payload):
        completion_payload["usage"] = None
        assert map_response(completion_payload).usage.total_tokens == 0

    def test_null_usage_fields_are_zero(self, completion_payload):
        completion_payload["usage"] = {"prompt_tokens": 9, "completion_tokens": None, "total_tokens": None}
        usage = map_response(completion_payload).usage
        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (9, 0, 0)

    def test_null_content_becomes_empty_string(self, completion_payload):
        completion_payload["choices"][0]["message"]["content"] = None
        assert map_response(completion_payload).message == ""

    def test_only_first_choice_used(self, completion_payload):
        completion_payload["choices"].append({
            "index": 1, "message": {"role": "assistant", "content": "second"}, "finish_reason": "stop",
        })
        assert map_response(completion_payload).message == "Hello there!"


class TestConversationId:

    def test_falls_back_to_upstream_id(self, completion_payload):
        assert map_response(completion_payload).conversation_id == "abc123"

    def test_echoes_input_id(self, completion_payload):
        assert map_response(completion_payload, "conv-1").conversation_id == "conv-1"

    def test_empty_input_id_falls_back(self, completion_payload):
        assert map_response(completion_payload, "").conversation_id == "abc123"


class TestTimestamp:

    def test_generated_not_copied(self, completion_payload):
        result = map_response(completion_payload)
        stamp = datetime.fromisoformat(result.timestamp)
        assert stamp.tzinfo is not None
        assert stamp.year >= 2024
        assert str(completion_payload["created"]) not in result.timestamp


class TestMalformed:

    def test_empty_choices(self, completion_payload):
        completion_payload["choices"] = []
        with pytest.raises(MalformedResponseError):
            map_response(completion_payload)

    def test_missing_choices(self, completion_payload):
        del completion_payload["choices"]
        with pytest.raises(MalformedResponseError):
            map_response(completion_payload)

    def test_choice_without_message(self, completion_payload):
        del completion_payload["choices"][0]["message"]
        with pytest.raises(MalformedResponseError):
            map_response(completion_payload)

    def test_missing_id(self, completion_payload):
        del completion_payload["id"]
        with pytest.raises(MalformedResponseError):
            map_response(completion_payload)

    def test_not_an_object(self):
        with pytest.raises(MalformedResponseError):
            map_response(["not", "a", "dict"])
