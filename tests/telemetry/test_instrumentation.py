"""Telemetry configuration and instrumentation tests."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from seabattle.engine.coordinates import Position
from seabattle.engine.game import create_game_state, initialize_game
from seabattle.engine.placement import place_ship
from seabattle.engine.player import PlayerId
from seabattle.engine.ship import Ship, ShipType
from seabattle.engine.turns import process_turn
from seabattle.telemetry import config as telemetry_config_module
from seabattle.telemetry import logger as logger_module
from seabattle.telemetry import metrics as metrics_module
from seabattle.telemetry import tracer as tracer_module
from seabattle.telemetry.config import TelemetryConfig


class DummySpan:
    def __init__(self, names: list[str], span_name: str) -> None:
        self._names = names
        self._names.append(span_name)
        self.attributes: dict[str, object] = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def set_attribute(self, key, value):
        self.attributes[key] = value


class DummyTracer:
    def __init__(self) -> None:
        self.span_names: list[str] = []

    def start_as_current_span(self, name: str):
        return DummySpan(self.span_names, name)


ENV_VARS = (
    "SEABATTLE_ENABLE_TRACING",
    "SEABATTLE_ENABLE_METRICS",
    "SEABATTLE_ENABLE_LOGGING",
    "SEABATTLE_LOG_LEVEL",
    "OTEL_TRACES_ENABLED",
    "OTEL_METRICS_ENABLED",
    "OTEL_LOGS_ENABLED",
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
    "OTEL_EXPORTER_OTLP_METRICS_ENDPOINT",
    "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT",
    "OTEL_SERVICE_NAME",
    "OTEL_SERVICE_NAMESPACE",
    "OTEL_RESOURCE_ATTRIBUTES",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_defaults_from_empty_env(clean_env) -> None:
    config = TelemetryConfig.from_env()
    assert config == TelemetryConfig()
    assert config.service_name == "seabattle"
    assert not (config.enable_tracing or config.enable_metrics or config.enable_logging)


def test_config_reads_env(clean_env) -> None:
    clean_env.setenv("SEABATTLE_ENABLE_METRICS", "yes")
    clean_env.setenv("SEABATTLE_LOG_LEVEL", "debug")
    clean_env.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317/")
    clean_env.setenv("OTEL_SERVICE_NAME", "seabattle-test")
    clean_env.setenv("OTEL_RESOURCE_ATTRIBUTES", "env=ci,broken,team = games")

    config = TelemetryConfig.from_env()
    assert config.enable_metrics is True
    assert config.enable_tracing is True
    assert config.log_level == "DEBUG"
    assert config.otlp_traces_endpoint == "http://collector:4317/v1/traces"
    assert config.otlp_logs_endpoint == "http://collector:4317/v1/logs"
    assert config.service_name == "seabattle-test"
    assert config.resource_attributes == {"env": "ci", "team": "games"}


def test_explicit_flag_wins_over_endpoint(clean_env) -> None:
    clean_env.setenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "http://collector:4317")
    clean_env.setenv("SEABATTLE_ENABLE_TRACING", "0")
    config = TelemetryConfig.from_env()
    assert config.otlp_traces_endpoint == "http://collector:4317"
    assert config.enable_tracing is False


def test_unknown_log_level_rejected() -> None:
    with pytest.raises(ValidationError):
        TelemetryConfig(log_level="chatty")


def test_load_telemetry_config_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    telemetry_config_module.load_telemetry_config.cache_clear()
    calls = {"count": 0}

    def fake_from_env(cls, **overrides):
        calls["count"] += 1
        return TelemetryConfig(enable_tracing=True)

    monkeypatch.setattr(TelemetryConfig, "from_env", classmethod(fake_from_env))
    try:
        first = telemetry_config_module.load_telemetry_config()
        second = telemetry_config_module.load_telemetry_config()
    finally:
        telemetry_config_module.load_telemetry_config.cache_clear()
    assert first is second
    assert calls["count"] == 1


def test_init_telemetry_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr(telemetry_config_module, "init_logging", lambda cfg: calls.append("lo"))

    telemetry_config_module.init_telemetry(TelemetryConfig())
    assert calls == []


def test_init_telemetry_respects_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr(telemetry_config_module, "init_logging", lambda cfg: calls.append("lo"))

    telemetry_config_module.init_telemetry(TelemetryConfig(enable_tracing=True, enable_logging=True))
    assert calls == ["tr", "lo"]


def test_init_tracing_and_metrics_install_providers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tracer_module, "_TRACERS", {})
    monkeypatch.setattr(tracer_module, "_TRACER_PROVIDER", None)
    monkeypatch.setattr(metrics_module, "_METERS", {})
    monkeypatch.setattr(metrics_module, "_METER_PROVIDER", None)
    monkeypatch.setattr(metrics_module, "_INSTRUMENTS", {})

    provider = MagicMock()
    monkeypatch.setattr(tracer_module, "TracerProvider", MagicMock(return_value=provider))
    monkeypatch.setattr(tracer_module, "OTLPSpanExporter", MagicMock())
    monkeypatch.setattr(tracer_module, "BatchSpanProcessor", MagicMock())
    set_tracer_provider = MagicMock()
    monkeypatch.setattr(tracer_module.trace, "set_tracer_provider", set_tracer_provider)

    config = TelemetryConfig(enable_tracing=True, otlp_traces_endpoint="http://example")
    assert tracer_module.init_tracing(config) is provider.get_tracer.return_value
    set_tracer_provider.assert_called_once_with(provider)
    assert tracer_module.get_tracer() is provider.get_tracer.return_value

    meter_provider = MagicMock()
    monkeypatch.setattr(metrics_module, "MeterProvider", MagicMock(return_value=meter_provider))
    monkeypatch.setattr(metrics_module, "OTLPMetricExporter", MagicMock())
    monkeypatch.setattr(metrics_module, "PeriodicExportingMetricReader", MagicMock())
    monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", MagicMock())

    metrics_module.init_metrics(
        TelemetryConfig(enable_metrics=True, otlp_metrics_endpoint="http://example")
    )
    assert metrics_module.get_meter() is meter_provider.get_meter.return_value

    metrics_module.record_game_metric("seabattle_test_total", 2, {"k": "v"})
    metrics_module.record_game_metric("seabattle_test_total", 1)
    meter = meter_provider.get_meter.return_value
    meter.create_counter.assert_called_once_with("seabattle_test_total")
    assert meter.create_counter.return_value.add.call_count == 2


def test_tracers_and_meters_are_scoped_per_module(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tracer_module, "_TRACERS", {})
    monkeypatch.setattr(tracer_module, "_TRACER_PROVIDER", None)
    monkeypatch.setattr(metrics_module, "_METERS", {})
    monkeypatch.setattr(metrics_module, "_METER_PROVIDER", None)
    monkeypatch.setattr(tracer_module.trace, "get_tracer", lambda name: MagicMock(scope=name))
    monkeypatch.setattr(metrics_module.otel_metrics, "get_meter", lambda name: MagicMock(scope=name))

    combat_tracer = tracer_module.get_tracer("seabattle.engine.combat")
    placement_tracer = tracer_module.get_tracer("seabattle.engine.placement")
    assert combat_tracer is not placement_tracer
    assert combat_tracer.scope == "seabattle.engine.combat"
    assert placement_tracer.scope == "seabattle.engine.placement"
    assert tracer_module.get_tracer("seabattle.engine.combat") is combat_tracer

    turns_meter = metrics_module.get_meter("seabattle.engine.turns")
    assert turns_meter.scope == "seabattle.engine.turns"
    assert metrics_module.get_meter("seabattle.engine.combat") is not turns_meter
    assert metrics_module.get_meter("seabattle.engine.turns") is turns_meter


def test_engine_modules_hold_distinct_tracers() -> None:
    from seabattle.engine import combat, placement, turns

    assert combat.tracer is not placement.tracer
    assert combat.tracer is not turns.tracer


def test_log_level_alone_configures_logging(clean_env, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[TelemetryConfig] = []
    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: None)
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: None)
    monkeypatch.setattr(telemetry_config_module, "init_logging", calls.append)
    clean_env.setenv("SEABATTLE_LOG_LEVEL", "DEBUG")

    telemetry_config_module.init_telemetry(TelemetryConfig.from_env())
    assert len(calls) == 1
    assert calls[0].log_level == "DEBUG"
    assert calls[0].enable_logging is False


def test_console_logging_skips_otlp_when_export_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger_module, "_LOGGER", None)
    install_otlp = MagicMock()
    monkeypatch.setattr(logger_module, "_install_otlp_handler", install_otlp)

    config = TelemetryConfig(log_level="debug", otlp_logs_endpoint="http://example")
    logger = logger_module.init_logging(config)
    assert logger.level == logging.DEBUG
    install_otlp.assert_not_called()


def test_logging_init_without_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger_module, "_LOGGER", None)
    install_otlp = MagicMock()
    monkeypatch.setattr(logger_module, "_install_otlp_handler", install_otlp)

    logger = logger_module.init_logging(TelemetryConfig(log_level="warning"))
    assert logger is logger_module.get_logger()
    assert logger.level == logging.WARNING
    install_otlp.assert_not_called()


def test_logging_init_with_endpoint_attaches_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger_module, "_LOGGER", None)
    install_otlp = MagicMock()
    monkeypatch.setattr(logger_module, "_install_otlp_handler", install_otlp)

    config = TelemetryConfig(enable_logging=True, otlp_logs_endpoint="http://example")
    logger_module.init_logging(config)
    install_otlp.assert_called_once_with(config, logging.INFO)


def test_process_turn_emits_spans_and_game_metric(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer = DummyTracer()
    metric_calls: list[tuple[str, float, dict | None]] = []
    monkeypatch.setattr("seabattle.engine.turns.tracer", tracer)
    monkeypatch.setattr("seabattle.engine.combat.tracer", tracer)
    monkeypatch.setattr(
        "seabattle.engine.game.record_game_metric",
        lambda name, value, attrs=None: metric_calls.append((name, value, attrs)),
    )

    state = create_game_state("Alice", "Bob")
    bob = state.players[PlayerId.PLAYER2]
    submarine = Ship("submarine-1", ShipType.SUBMARINE, Position(0, 0))
    bob.ships = [submarine]
    bob.ships_remaining = 1
    place_ship(bob.board, submarine)
    initialize_game(state)

    process_turn(state, Position(0, 0))
    assert tracer.span_names == ["turns.process_turn", "combat.process_shot"]
    assert metric_calls == [("seabattle_game_completed_total", 1, {"winner": "player1"})]


def test_rejected_turn_still_traced(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer = DummyTracer()
    monkeypatch.setattr("seabattle.engine.turns.tracer", tracer)
    state = create_game_state("Alice", "Bob")
    process_turn(state, Position(20, 20))
    assert tracer.span_names == ["turns.process_turn"]
