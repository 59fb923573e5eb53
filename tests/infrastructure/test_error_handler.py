import logging
from unittest.mock import Mock

from favactors.errors import CommitError
from favactors.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from favactors.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = CommitError("could not save")
    handler.handle(error, ErrorSeverity.ERROR, {"action": "add"})

    logger.error.assert_called_once()
    assert logger.error.call_args.kwargs["extra"] == {"error_context": {"action": "add"}}
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.ERROR
    assert event.context == {"action": "add"}


def test_ui_callback_receives_errors():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)


def test_warnings_are_not_shown_in_the_ui():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("warn"), ErrorSeverity.WARNING)

    logger.warning.assert_called_once()
    callback.assert_not_called()
