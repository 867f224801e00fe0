"""
Unit tests for configuration
"""

import pytest
from loguru import logger

import config.config as cfg
from config.catalog import CURRENCY_PAIR_PAGES, get_pair_label
from src.utils.time_utils import is_valid_currency_pair


def test_resolve_posting_channel():
    """Test production and development channel selection"""
    assert cfg.resolve_posting_channel(True, -100, -200) == -100
    assert cfg.resolve_posting_channel(False, -100, -200) == -200
    assert cfg.resolve_posting_channel(False, -100, None) == -100
    assert cfg.resolve_posting_channel(True, None, -200) is None


def test_resolve_posting_channel_warns_on_fallback():
    """Test development falling back to the production channel is logged"""
    messages = []
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        assert cfg.resolve_posting_channel(False, -100, None) == -100
        assert cfg.resolve_posting_channel(False, -100, -200) == -200
    finally:
        logger.remove(sink_id)

    assert len(messages) == 1
    assert "production channel" in messages[0]


def test_validate_config_lists_missing(monkeypatch):
    """Test every missing setting is reported at once"""
    monkeypatch.setattr(cfg, "ACTIVE_BOT_TOKEN", "")
    monkeypatch.setattr(cfg, "POSTING_CHANNEL_ID", None)
    monkeypatch.setattr(cfg, "ADMIN_IDS", [])

    with pytest.raises(ValueError) as exc_info:
        cfg.validate_config()

    message = str(exc_info.value)
    assert "CHANNEL_ID is required" in message
    assert "ADMIN_IDS is required" in message
    assert "BOT_TOKEN is required" in message


def test_validate_config_passes(monkeypatch):
    monkeypatch.setattr(cfg, "ACTIVE_BOT_TOKEN", "123:abc")
    monkeypatch.setattr(cfg, "POSTING_CHANNEL_ID", -100)
    monkeypatch.setattr(cfg, "ADMIN_IDS", [1])
    monkeypatch.setattr(cfg, "DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    assert cfg.validate_config() is True


def test_parse_chat_id():
    assert cfg._parse_chat_id("-1001") == -1001
    assert cfg._parse_chat_id("") is None
    assert cfg._parse_chat_id("abc") is None


def test_pair_catalog_is_well_formed():
    """Test every catalog value is a valid pair code with a label"""
    values = [value for page in CURRENCY_PAIR_PAGES for value, _ in page]

    assert len(values) == len(set(values))
    for value in values:
        assert is_valid_currency_pair(value)
        assert get_pair_label(value).endswith("(OTC)")
