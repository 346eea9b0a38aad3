"""Tests for the lazy logger adapter."""
from __future__ import annotations

import logging

from keyset_paginator.infra.logging import LazyLoggerAdapter, get_lazy_logger

LOGGER_NAME = "tests.lazy"


class TestLazyLogger:
    def test_callable_not_evaluated_when_disabled(self, caplog):
        calls = []
        logger = get_lazy_logger(LOGGER_NAME)

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            logger.debug(lambda: calls.append("msg") or "expensive")
            logger.debug("rows: %s", lambda: calls.append("arg") or 3)

        assert calls == []
        assert caplog.records == []

    def test_callables_evaluated_when_enabled(self, caplog):
        logger = get_lazy_logger(LOGGER_NAME)

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            logger.debug(lambda: "built message")
            logger.info("rows: %s", lambda: 3)

        assert [record.getMessage() for record in caplog.records] == [
            "built message",
            "rows: 3",
        ]

    def test_plain_messages_pass_through(self, caplog):
        logger = get_lazy_logger(LOGGER_NAME)

        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            logger.warning("cursor rejected")

        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].getMessage() == "cursor rejected"

    def test_context_bound_as_extra(self, caplog):
        logger = get_lazy_logger(LOGGER_NAME, entity="Post")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            logger.info("page fetched")

        assert isinstance(logger, LazyLoggerAdapter)
        assert caplog.records[0].entity == "Post"
