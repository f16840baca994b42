# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for registry logging setup
"""

import dataclasses
import json
import logging

import pytest

from pub_registry.core.logging import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_service_logger,
    log_event,
)
from pub_registry.main import create_app


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    configure_logging("INFO", "text")


def namespace_formatter():
    handlers = logging.getLogger("pub_registry").handlers
    assert len(handlers) == 1
    return handlers[0].formatter


class TestConfigureLogging:

    def test_service_loggers_inherit_level(self):
        configure_logging("DEBUG", "text")

        logger = get_service_logger("registry")

        assert logger.getEffectiveLevel() == logging.DEBUG
        assert logger.handlers == []
        assert isinstance(namespace_formatter(), TextFormatter)

    def test_reconfigure_replaces_handler(self):
        configure_logging("INFO", "text")
        configure_logging("ERROR", "json")

        assert get_service_logger("auth").getEffectiveLevel() == logging.ERROR
        assert isinstance(namespace_formatter(), JSONFormatter)

    def test_create_app_applies_given_config(self, config, token_store):
        create_app(dataclasses.replace(config, log_level="WARNING", log_format="json"), token_store=token_store)

        assert get_service_logger("upload_staging").getEffectiveLevel() == logging.WARNING
        assert isinstance(namespace_formatter(), JSONFormatter)


class TestJSONFormatter:

    def test_includes_event_fields(self):
        configure_logging("INFO", "json")
        logger = logging.getLogger("pub_registry.service.test")
        records = []
        handler = logging.Handler()
        handler.emit = records.append
        logger.addHandler(handler)
        try:
            log_event(logger, "Package version published", package="a", version="1.0.0")
        finally:
            logger.removeHandler(handler)

        data = json.loads(JSONFormatter().format(records[0]))

        assert data["message"] == "Package version published"
        assert data["level"] == "INFO"
        assert data["logger"] == "pub_registry.service.test"
        assert data["package"] == "a"
        assert data["version"] == "1.0.0"
