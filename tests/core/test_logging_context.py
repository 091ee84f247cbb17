import logging

from benefits.core.log.context import ContextFilter, log_context


def _record() -> logging.LogRecord:
    return logging.LogRecord("benefits", logging.INFO, __file__, 1, "message", None, None)


def test_scoped_context_is_rendered_and_restored() -> None:
    context_filter = ContextFilter()

    with log_context.scoped(request_id="abc", path="/health", skipped=None):
        inside = _record()
        context_filter.filter(inside)
    outside = _record()
    context_filter.filter(outside)

    assert inside.context == "request_id=abc path=/health "
    assert outside.context == ""


def test_existing_context_is_kept() -> None:
    record = _record()
    record.context = "job=seed "

    with log_context.scoped(request_id="other"):
        ContextFilter().filter(record)

    assert record.context == "job=seed "
