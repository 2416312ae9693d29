"""
Unit tests for processor idle sampling.

Tests parsing of the tick counter line, the idle percentage formula,
the warm-up and zero-delta fallbacks, and error reporting for an
unreadable or malformed source.
"""

import errno
import os

import pytest

from idlerun.models import Sample
from idlerun.system.idle import IdleMonitor, parse_stat_line
from idlerun.validation import IdleSourceError


@pytest.mark.unit
class TestParseStatLine:
    """Test cases for parsing a tick counter line."""

    def test_parse_sums_first_seven_fields(self):
        """Only the first seven counters contribute to the total."""
        sample = parse_stat_line("cpu  10 20 30 400 5 6 7 1000 2000 3000\n")

        assert sample == Sample(idle_ticks=400, total_ticks=478)

    def test_parse_accepts_any_label(self):
        sample = parse_stat_line("cpu3 1 1 1 1 1 1 1")
        assert sample.total_ticks == 7
        assert sample.idle_ticks == 1

    def test_parse_too_few_fields(self):
        """Fewer than seven counters is a parse error reported as EFAULT."""
        with pytest.raises(IdleSourceError) as exc_info:
            parse_stat_line("cpu 1 2 3 4 5 6\n")

        assert exc_info.value.errno == errno.EFAULT

    def test_parse_non_numeric_field(self):
        with pytest.raises(IdleSourceError) as exc_info:
            parse_stat_line("cpu 1 2 three 4 5 6 7\n")

        assert exc_info.value.errno == errno.EFAULT

    def test_parse_empty_line(self):
        with pytest.raises(IdleSourceError):
            parse_stat_line("")


@pytest.mark.unit
class TestIdleMonitor:
    """Test cases for IdleMonitor sampling."""

    def test_percentage_between_consecutive_samples(self, stat_file):
        """Idle percentage is exactly 100 * delta idle / delta total."""
        stat_file.write(idle=1000, total=4000)
        monitor = IdleMonitor(str(stat_file.path))
        monitor.prime()

        stat_file.write(idle=1300, total=4400)
        assert monitor.sample() == 100.0 * 300 / 400

        stat_file.write(idle=1310, total=4500)
        assert monitor.sample() == 100.0 * 10 / 100
        monitor.close()

    def test_sample_updates_previous(self, stat_file):
        stat_file.write(idle=50, total=100)
        monitor = IdleMonitor(str(stat_file.path))
        monitor.prime()

        stat_file.write(idle=80, total=200)
        monitor.sample()

        assert monitor.previous == Sample(idle_ticks=80, total_ticks=200)
        monitor.close()

    def test_first_sample_without_baseline_is_warm_up(self, stat_file):
        """Without a baseline the first sample only records one."""
        stat_file.write(idle=500, total=1000)
        monitor = IdleMonitor(str(stat_file.path))

        assert monitor.sample() is None
        assert monitor.previous == Sample(idle_ticks=500, total_ticks=1000)

        stat_file.write(idle=590, total=1100)
        assert monitor.sample() == pytest.approx(90.0)
        monitor.close()

    def test_zero_total_delta_returns_none(self, stat_file):
        """No elapsed ticks yields no decision instead of dividing by zero."""
        stat_file.write(idle=500, total=1000)
        monitor = IdleMonitor(str(stat_file.path))
        monitor.prime()

        assert monitor.sample() is None
        monitor.close()

    def test_counter_reset_is_not_clamped(self, stat_file):
        """A counter going backwards produces an out-of-range value, not an error."""
        stat_file.write(idle=1000, total=2000)
        monitor = IdleMonitor(str(stat_file.path))
        monitor.prime()

        stat_file.write(idle=900, total=2100)
        assert monitor.sample() == pytest.approx(-100.0)

        stat_file.write(idle=1000, total=1000)
        assert monitor.sample() == pytest.approx(100.0 * 100 / -1100)
        monitor.close()

    def test_handle_is_reused(self, stat_file):
        """The source is opened once and rewound for every read."""
        stat_file.write(idle=10, total=100)
        monitor = IdleMonitor(str(stat_file.path))
        monitor.prime()
        handle = monitor._handle

        stat_file.write(idle=60, total=200)
        assert monitor.sample() == pytest.approx(50.0)
        assert monitor._handle is handle
        monitor.close()
        assert monitor._handle is None

    def test_missing_source_reports_errno(self, temp_dir):
        monitor = IdleMonitor(str(temp_dir / "missing"))

        with pytest.raises(IdleSourceError) as exc_info:
            monitor.prime()

        assert exc_info.value.errno == errno.ENOENT

    def test_malformed_source(self, stat_file):
        stat_file.write_raw("cpu 1 2 3\n")
        with IdleMonitor(str(stat_file.path)) as monitor:
            with pytest.raises(IdleSourceError) as exc_info:
                monitor.sample()

        assert exc_info.value.errno == errno.EFAULT

    def test_empty_source(self, stat_file):
        stat_file.write_raw("")
        with IdleMonitor(str(stat_file.path)) as monitor:
            with pytest.raises(IdleSourceError):
                monitor.sample()

    def test_real_proc_stat(self):
        """On Linux the default source parses and yields a sane first reading."""
        if not os.path.exists("/proc/stat"):
            pytest.skip("/proc/stat not available")

        with IdleMonitor() as monitor:
            sample = monitor.prime()

        assert sample.total_ticks >= sample.idle_ticks >= 0
