from __future__ import annotations

import logging

from maestro.config.compiler_config import configure_logging, default_policy


def test_default_policy_values(monkeypatch) -> None:
    for name in (
        "MAESTRO_DEFAULT_ARTBOARD_WIDTH",
        "MAESTRO_DEFAULT_ARTBOARD_HEIGHT",
        "MAESTRO_DEFAULT_DURATION_S",
        "MAESTRO_MAX_PROMPT_CHARS",
        "MAESTRO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    policy = default_policy()
    assert policy.default_artboard_width == 800
    assert policy.default_artboard_height == 600
    assert policy.default_duration_s == 4.0
    assert policy.max_prompt_chars == 4000
    assert policy.log_level == "INFO"


def test_policy_reads_and_clamps_env(monkeypatch) -> None:
    monkeypatch.setenv("MAESTRO_DEFAULT_ARTBOARD_WIDTH", "1920")
    monkeypatch.setenv("MAESTRO_DEFAULT_ARTBOARD_HEIGHT", "2")
    monkeypatch.setenv("MAESTRO_DEFAULT_DURATION_S", "not-a-number")
    monkeypatch.setenv("MAESTRO_MAX_PROMPT_CHARS", "120")
    monkeypatch.setenv("MAESTRO_LOG_LEVEL", "debug")
    policy = default_policy()
    assert policy.default_artboard_width == 1920
    assert policy.default_artboard_height == 16
    assert policy.default_duration_s == 4.0
    assert policy.max_prompt_chars == 120
    assert policy.log_level == "DEBUG"


def test_unknown_log_level_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("MAESTRO_LOG_LEVEL", "chatty")
    assert default_policy().log_level == "INFO"


def test_configure_logging_sets_package_level(monkeypatch) -> None:
    monkeypatch.setenv("MAESTRO_LOG_LEVEL", "WARNING")
    configure_logging()
    assert logging.getLogger("maestro").level == logging.WARNING
    monkeypatch.setenv("MAESTRO_LOG_LEVEL", "INFO")
    configure_logging()
    assert logging.getLogger("maestro").level == logging.INFO
