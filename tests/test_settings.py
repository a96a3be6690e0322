import io
import logging

import logging_setup
from logging_setup import configure_logging, get_logger
from metric_guide import metric_guide
from settings import DEFAULT_MODEL, DEFAULT_TEMPERATURE, load_settings


def test_load_settings_defaults() -> None:
    settings = load_settings({})

    assert settings.openai_api_key == ""
    assert settings.openai_model == DEFAULT_MODEL
    assert settings.temperature == DEFAULT_TEMPERATURE
    assert settings.log_level == "INFO"
    assert not settings.ai_enabled


def test_load_settings_reads_environment() -> None:
    settings = load_settings(
        {
            "OPENAI_API_KEY": " sk-test ",
            "LEDGERLENS_MODEL": "gpt-4o",
            "LEDGERLENS_TEMPERATURE": "0.7",
            "LEDGERLENS_LOG_LEVEL": "debug",
        }
    )

    assert settings.openai_api_key == "sk-test"
    assert settings.openai_model == "gpt-4o"
    assert settings.temperature == 0.7
    assert settings.log_level == "DEBUG"
    assert settings.ai_enabled


def test_load_settings_bad_temperature_falls_back() -> None:
    assert load_settings({"LEDGERLENS_TEMPERATURE": "warm"}).temperature == DEFAULT_TEMPERATURE


def test_configure_logging_attaches_single_handler(monkeypatch) -> None:
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    pkg_logger = logging.getLogger("ledgerlens")
    monkeypatch.setattr(pkg_logger, "handlers", [])
    monkeypatch.setattr(pkg_logger, "level", pkg_logger.level)
    monkeypatch.setattr(pkg_logger, "propagate", pkg_logger.propagate)
    stream = io.StringIO()

    configure_logging("WARNING", stream=stream)
    configure_logging("DEBUG", stream=stream)
    get_logger("ledgerlens.test").warning("parsed %d rows", 3)

    assert len(pkg_logger.handlers) == 1
    assert pkg_logger.level == logging.WARNING
    assert "parsed 3 rows" in stream.getvalue()


def test_metric_guide_uses_domain_labels() -> None:
    personal = [row["Metric"] for row in metric_guide("personal")]
    business = [row["Metric"] for row in metric_guide("business")]

    assert personal[:3] == ["Income", "Expenses", "Total Balance"]
    assert business[:3] == ["Revenue", "Costs", "Profit"]
