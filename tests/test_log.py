"""Tests for logging configuration."""

import logging

from motordef_tools.log import disable_verbose, enable_verbose


class TestVerboseLogging:
    """Test enable_verbose and disable_verbose."""

    def test_enable_adds_handler(self):
        """Enabling adds one stream handler at the requested level."""
        logger = logging.getLogger("motordef_tools")
        try:
            enable_verbose("DEBUG")
            enable_verbose("DEBUG")
            handlers = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
            assert len(handlers) == 1
            assert logger.level == logging.DEBUG
        finally:
            disable_verbose()

    def test_disable_removes_handler(self):
        """Disabling removes output handlers."""
        logger = logging.getLogger("motordef_tools")
        enable_verbose("INFO")
        disable_verbose()
        handlers = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
        assert handlers == []
        assert logger.level == logging.WARNING
