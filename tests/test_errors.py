"""Tests for classifying failures into diagnostic errors."""

import httpx
import pytest
from pydantic import ValidationError

from florentine_mcp.errors import (
    MODE_MISSING_MESSAGE,
    NO_TOKEN_MESSAGE,
    ErrorCode,
    classify,
    handle_validation_error,
    to_error_response,
    unknown_error,
)
from florentine_mcp.models import ArgsConfig, EnvConfig, RequestBody


def validation_error(model, data) -> ValidationError:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(data)
    return exc_info.value


def violation(error_type: str, loc: tuple, msg: str = "problem", **extra) -> dict:
    return {"type": error_type, "loc": loc, "msg": msg, "input": None, **extra}


class TestModeRules:
    """Tests for the mode argument codes."""

    def test_missing_mode(self):
        response = handle_validation_error(validation_error(ArgsConfig, {}))
        assert response.error.error_code == "MODE_MISSING"
        assert response.error.message == MODE_MISSING_MESSAGE

    def test_invalid_mode(self):
        response = handle_validation_error(validation_error(ArgsConfig, {"mode": "auto"}))
        assert response.error.error_code == "MODE_INVALID"
        assert "--mode" in response.error.message

    def test_wrong_type_counts_as_missing(self):
        code, _ = classify(violation("string_type", ("mode",)))
        assert code is ErrorCode.MODE_MISSING


class TestLlmRules:
    """Tests for the llmService/llmKey codes."""

    def test_key_without_service(self):
        response = handle_validation_error(
            validation_error(EnvConfig, {"florentineToken": "t", "llmKey": "k"})
        )
        assert response.error.error_code == "LLM_KEY_WITHOUT_SERVICE"
        assert '"llmService"' in response.error.message

    def test_service_without_key(self):
        response = handle_validation_error(
            validation_error(EnvConfig, {"florentineToken": "t", "llmService": "openai"})
        )
        assert response.error.error_code == "LLM_SERVICE_WITHOUT_KEY"
        assert '"llmKey"' in response.error.message

    def test_key_violation_mentioning_service_never_generic(self):
        message = 'Value error, "llmKey" needs "llmService"'
        code, text = classify(violation("value_error", ("config", "llmKey"), message))
        assert code is ErrorCode.LLM_KEY_WITHOUT_SERVICE
        assert text == message

    def test_key_violation_without_service_mention_is_generic(self):
        code, text = classify(violation("string_type", ("llmKey",)))
        assert code is ErrorCode.INVALID_INPUT
        assert text == '"llmKey" must be a string.'

    def test_pair_rule_inside_request_body(self):
        error = validation_error(
            RequestBody, {"question": "q", "config": {"returnTypes": ["answer"], "llmKey": "k"}}
        )
        assert handle_validation_error(error).error.error_code == "LLM_KEY_WITHOUT_SERVICE"


class TestTokenRule:
    """Tests for the missing credential code."""

    def test_missing_token(self):
        response = handle_validation_error(validation_error(EnvConfig, {}))
        assert response.error.error_code == "NO_TOKEN"
        assert response.error.message == NO_TOKEN_MESSAGE
        assert response.error.status_code == 400
        assert response.error.request_id == "local"

    def test_empty_token_is_too_short(self):
        response = handle_validation_error(validation_error(EnvConfig, {"florentineToken": ""}))
        assert response.error.error_code == "INVALID_INPUT"
        assert response.error.message == '"florentineToken" is too short.'

    def test_only_first_violation_counts(self):
        """The token is declared before llmService, so its violation wins."""
        response = handle_validation_error(validation_error(EnvConfig, {"llmService": "bad"}))
        assert response.error.error_code == "NO_TOKEN"


class TestInvalidInputMessages:
    """Tests for the generic fallback messages."""

    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (violation("missing", ("config", "returnTypes")), '"config.returnTypes" is required, but missing.'),
            (violation("int_type", ("value",)), '"value" must be a number.'),
            (violation("list_type", ("returnTypes",)), '"returnTypes" must be a list.'),
            (violation("literal_error", ("returnTypes", 0)), 'The value for "returnTypes.0" is not valid.'),
            (violation("string_too_short", ("question",)), '"question" is too short.'),
            (violation("too_long", ("returnTypes",)), '"returnTypes" is too long.'),
            (violation("value_error", ("requiredInputs",), "Value error, bad"), 'Problem with "requiredInputs": Value error, bad'),
            (violation("union_tag_invalid", ("value",), "odd"), 'There is a problem with "value": odd'),
        ],
    )
    def test_message_per_kind(self, error, message):
        code, text = classify(error)
        assert code is ErrorCode.INVALID_INPUT
        assert text == message

    def test_refinement_path_includes_field(self):
        error = validation_error(
            RequestBody,
            {
                "question": "q",
                "config": {
                    "returnTypes": ["result"],
                    "requiredInputs": [{"keyPath": "id", "value": 1, "collections": ["users"]}],
                },
            },
        )
        response = handle_validation_error(error)
        assert response.error.error_code == "INVALID_INPUT"
        assert response.error.message == (
            'Problem with "config.requiredInputs.0.collections": '
            '"collections" can only be set together with "database".'
        )

    def test_union_value_names_the_field_only(self):
        error = validation_error(
            RequestBody,
            {
                "question": "q",
                "config": {
                    "returnTypes": ["result"],
                    "requiredInputs": [{"keyPath": "id", "value": [1, 2]}],
                },
            },
        )
        response = handle_validation_error(error)
        assert response.error.error_code == "INVALID_INPUT"
        assert response.error.message.startswith('Problem with "config.requiredInputs.0.value": ')
        assert ".str" not in response.error.message

    def test_non_string_question(self):
        error = validation_error(RequestBody, {"question": 5, "config": {"returnTypes": ["result"]}})
        assert handle_validation_error(error).error.message == '"question" must be a string.'

    def test_invalid_json_from_environment(self):
        error = validation_error(EnvConfig, {"florentineToken": "t", "returnTypes": "not json"})
        message = handle_validation_error(error).error.message
        assert message.startswith('Problem with "returnTypes": ')


class TestUnknownErrors:
    """Tests for failures that are not validation errors."""

    def test_unknown_error_shape(self):
        assert unknown_error().to_wire() == {
            "error": {
                "name": "FlorentineUnknownError",
                "message": "An unknown error occurred.",
                "errorCode": "UNKNOWN_ERROR",
                "statusCode": 500,
                "requestId": "local",
            }
        }

    @pytest.mark.parametrize(
        "err", [RuntimeError("boom"), httpx.ConnectError("refused"), KeyError("x")]
    )
    def test_other_exceptions(self, err):
        response = to_error_response(err)
        assert response.error.error_code == "UNKNOWN_ERROR"
        assert response.error.status_code == 500

    def test_validation_errors_are_400(self):
        response = to_error_response(validation_error(ArgsConfig, {"mode": "x"}))
        assert response.error.status_code == 400
        assert response.error.name == "FlorentineApiError"
