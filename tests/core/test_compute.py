"""
Tests for shared compute utilities: Timer and optimizer settings.
"""

import pytest

from occusim.core.compute.timing import Timer, timed
from occusim.core.compute.tolerances import (
    BFGS_DEFAULT,
    NELDER_MEAD_DEFAULT,
    SUPPORTED_METHODS,
    select_settings,
)


class TestTimer:

    def test_sections_recorded(self):
        timer = Timer()
        timer.start()
        with timer.section("simulation"):
            sum(range(1000))
        with timer.section("simulation"):
            sum(range(1000))
        timer.stop()

        result = timer.result()
        assert result["total_seconds"] >= 0.0
        assert result["simulation"] >= 0.0
        assert set(result) == {"total_seconds", "simulation"}

    def test_result_before_stop_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_stop_before_start_raises(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_section_recorded_when_block_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(ZeroDivisionError):
            with timer.section("fitting"):
                1 / 0
        timer.stop()
        assert "fitting" in timer.result()

    def test_timed_context(self):
        with timed() as timer:
            sum(range(100))
        assert "total_seconds" in timer.result()


class TestOptimizerSettings:

    def test_select_bfgs(self):
        assert select_settings("BFGS") is BFGS_DEFAULT

    def test_select_nelder_mead(self):
        settings = select_settings("Nelder-Mead")
        assert settings is NELDER_MEAD_DEFAULT
        assert "xatol" in settings.as_options()

    def test_every_supported_method_has_settings(self):
        for method in SUPPORTED_METHODS:
            assert select_settings(method).method == method

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown optimizer method"):
            select_settings("newton")
