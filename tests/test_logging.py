"""Tests for structured logging utilities."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from apihelpers.utils.logging import (  # noqa: E402
    ContextLogger,
    StructuredLogFormatter,
    bind_event_context,
    clear_request_context,
    configure_logging,
    correlation_id,
    get_logger,
    request_id,
    set_request_context,
)


def _record(message: str = 'hello', **extra) -> logging.LogRecord:
    record = logging.LogRecord('apihelpers.test', logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter."""

    def test_formats_json(self) -> None:
        payload = json.loads(StructuredLogFormatter().format(_record()))
        assert payload['level'] == 'INFO'
        assert payload['logger'] == 'apihelpers.test'
        assert payload['message'] == 'hello'
        assert payload['source']['line'] == 10
        assert 'extra' not in payload

    def test_includes_extra_fields(self) -> None:
        payload = json.loads(StructuredLogFormatter().format(_record(reason='too big')))
        assert payload['extra'] == {'reason': 'too big'}

    def test_includes_request_context(self) -> None:
        set_request_context(req_id='req-1', corr_id='corr-1')
        try:
            payload = json.loads(StructuredLogFormatter().format(_record()))
        finally:
            clear_request_context()
        assert payload['request_id'] == 'req-1'
        assert payload['correlation_id'] == 'corr-1'

    def test_cleared_context_is_omitted(self) -> None:
        set_request_context(req_id='req-2')
        clear_request_context()
        payload = json.loads(StructuredLogFormatter().format(_record()))
        assert 'request_id' not in payload

    def test_includes_exception(self) -> None:
        try:
            raise ValueError('boom')
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(StructuredLogFormatter().format(record))
        assert payload['exception']['type'] == 'ValueError'
        assert payload['exception']['message'] == 'boom'


class TestGetLogger:
    """Tests for get_logger and ContextLogger."""

    def test_returns_context_logger(self) -> None:
        logger = get_logger('apihelpers.test', component='params')
        assert isinstance(logger, ContextLogger)
        assert logger.extra == {'component': 'params'}

    def test_merges_adapter_context(self) -> None:
        logger = get_logger('apihelpers.test', component='params')
        _, kwargs = logger.process('msg', {'extra': {'key': 'limit'}})
        assert kwargs['extra'] == {'key': 'limit', 'component': 'params'}

    def test_call_site_extra_wins(self) -> None:
        logger = get_logger('apihelpers.test', component='params')
        _, kwargs = logger.process('msg', {'extra': {'component': 'body'}})
        assert kwargs['extra'] == {'component': 'body'}


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_uses_log_level_env(self, monkeypatch) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        try:
            configure_logging()
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredLogFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestBindEventContext:
    """Tests for bind_event_context."""

    def teardown_method(self) -> None:
        clear_request_context()

    def test_uses_correlation_header(self) -> None:
        bind_event_context({
            'headers': {'x-correlation-id': 'corr-1'},
            'requestContext': {'requestId': 'req-1'},
        })
        assert request_id.get() == 'req-1'
        assert correlation_id.get() == 'corr-1'

    def test_correlation_falls_back_to_request_id(self) -> None:
        bind_event_context({'headers': None, 'requestContext': {'requestId': 'req-2'}})
        assert correlation_id.get() == 'req-2'

    def test_missing_ids_replace_previous_context(self) -> None:
        set_request_context('old-request', 'old-correlation')
        bind_event_context({})
        assert request_id.get() == ''
        assert correlation_id.get() == ''
