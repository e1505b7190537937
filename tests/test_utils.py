"""Tests for logging utilities and the width sweep script."""

import pytest
import logging
import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from piano_keyboard.keyboard.specification import KeyboardSpecification
from piano_keyboard.utils.logging_utils import (
    TqdmLoggingHandler, get_logger, resolve_level, setup_logging
)
from sweep_widths import sweep_sample


class TestLogging:
    """Tests for logging setup."""

    def test_resolve_level(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("INFO") == logging.INFO
        assert resolve_level(logging.WARNING) == logging.WARNING

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            resolve_level("chatty")

    def test_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging("DEBUG", log_file=str(log_file))
        get_logger("piano_keyboard.test").debug("written")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written" in log_file.read_text()

    def test_tqdm_handler(self):
        setup_logging(logging.INFO, use_tqdm=True)
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], TqdmLoggingHandler)


class TestSweep:
    """Tests for the per width sweep step."""

    def test_sweep_sample(self):
        counts = Counter()
        result = sweep_sample(KeyboardSpecification(width=800), counts)
        assert result['success']
        assert not result['perfect']
        assert result['height'] == 82
        assert counts == Counter({'bc_gaps': 1, 'ef_gaps': 1,
                                  'alternating_d_keys': 1, 'outer_gaps': 1})

    def test_sweep_perfect(self):
        counts = Counter()
        result = sweep_sample(KeyboardSpecification(width=1821), counts)
        assert result['perfect']
        assert not counts


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
