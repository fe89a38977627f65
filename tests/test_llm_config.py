"""Tests for lib_staffing.llm_config module."""

import os
from unittest.mock import MagicMock, patch

import pytest

from lib_staffing.llm_config import (
    create_openrouter_llm,
    create_primary_llm,
    get_available_llms,
)
from lib_staffing.settings import AnalyticsSettings


def _make_fake_llm(**kwargs):
    """Create a fake LLM object that records constructor args."""
    fake = MagicMock()
    fake.model = kwargs.get("model", "")
    fake.base_url = kwargs.get("base_url", "")
    fake.api_key = kwargs.get("api_key", "")
    fake.timeout = kwargs.get("timeout")
    return fake


_DEFAULT_OPTIONS = {"timeout": 60.0, "temperature": 0.3, "max_tokens": 8192}


# ---------------------------------------------------------------------------
# create_primary_llm
# ---------------------------------------------------------------------------


class TestCreatePrimaryLlm:
    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-key",
        "OPENAI_MODEL_NAME": "gpt-4o",
        "OPENAI_BASE_URL": "http://localhost:8045/v1",
    })
    def test_returns_llm_with_all_env_vars(self, mock_llm):
        llm = create_primary_llm()
        assert llm is not None
        mock_llm.assert_called_once_with(
            model="gpt-4o",
            api_key="test-key",
            base_url="http://localhost:8045/v1",
            **_DEFAULT_OPTIONS,
        )

    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-key",
        "OPENAI_MODEL_NAME": "gpt-4o",
    }, clear=True)
    def test_works_without_base_url(self, mock_llm):
        create_primary_llm()
        assert "base_url" not in mock_llm.call_args.kwargs

    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-key",
        "OPENAI_MODEL_NAME": "gpt-4o",
    }, clear=True)
    def test_passes_scoring_timeout_from_settings(self, mock_llm):
        llm = create_primary_llm(AnalyticsSettings(scoring_timeout_seconds=5))
        assert llm.timeout == 5

    @patch.dict(os.environ, {
        "OPENAI_MODEL_NAME": "gpt-4o",
    }, clear=True)
    def test_raises_when_api_key_missing(self):
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            create_primary_llm()

    @patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-key",
    }, clear=True)
    def test_raises_when_model_name_missing(self):
        with pytest.raises(ValueError, match="OPENAI_MODEL_NAME"):
            create_primary_llm()


# ---------------------------------------------------------------------------
# create_openrouter_llm
# ---------------------------------------------------------------------------


class TestCreateOpenrouterLlm:
    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENROUTER_API_KEY": "or-test-key",
        "OPENROUTER_MODEL_NAME": "openai/gpt-4o",
    })
    def test_returns_llm_when_configured(self, mock_llm):
        llm = create_openrouter_llm()
        assert llm is not None
        mock_llm.assert_called_once_with(
            model="openrouter/openai/gpt-4o",
            base_url="https://openrouter.ai/api/v1",
            api_key="or-test-key",
            **_DEFAULT_OPTIONS,
        )

    @patch("lib_staffing.llm_config.LLM", side_effect=ImportError("Fallback to LiteLLM is not available"))
    @patch.dict(os.environ, {
        "OPENROUTER_API_KEY": "or-test-key",
        "OPENROUTER_MODEL_NAME": "openai/gpt-4o",
    })
    def test_returns_none_when_litellm_fallback_unavailable(self, _mock_llm):
        assert create_openrouter_llm() is None

    @patch.dict(os.environ, {}, clear=True)
    def test_returns_none_when_not_configured(self):
        assert create_openrouter_llm() is None

    @patch.dict(os.environ, {
        "OPENROUTER_API_KEY": "or-test-key",
    }, clear=True)
    def test_returns_none_when_model_missing(self):
        assert create_openrouter_llm() is None

    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENROUTER_API_KEY": "or-test-key",
        "OPENROUTER_MODEL_NAME": "openrouter/openai/gpt-4o",
    })
    def test_does_not_double_prefix_openrouter(self, mock_llm):
        create_openrouter_llm()
        assert mock_llm.call_args.kwargs["model"] == "openrouter/openai/gpt-4o"


# ---------------------------------------------------------------------------
# get_available_llms
# ---------------------------------------------------------------------------


class TestGetAvailableLlms:
    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-key",
        "OPENAI_MODEL_NAME": "gpt-4o",
        "OPENROUTER_API_KEY": "or-key",
        "OPENROUTER_MODEL_NAME": "openai/gpt-4o",
    })
    def test_returns_both_when_both_configured(self, mock_llm):
        labels = [label for label, _ in get_available_llms()]
        assert labels == ["primary", "openrouter"]

    @patch("lib_staffing.llm_config.LLM", side_effect=_make_fake_llm)
    @patch.dict(os.environ, {
        "OPENROUTER_API_KEY": "or-key",
        "OPENROUTER_MODEL_NAME": "openai/gpt-4o",
    }, clear=True)
    def test_returns_only_openrouter_when_primary_missing(self, mock_llm):
        labels = [label for label, _ in get_available_llms()]
        assert labels == ["openrouter"]

    @patch.dict(os.environ, {}, clear=True)
    def test_returns_empty_when_nothing_configured(self):
        assert get_available_llms() == []
