"""
Tests for AIRAC date calculation utilities.
"""

from datetime import datetime

import pytest

from cifp_reader.utils.airac_date_calculator import AIRACDateCalculator, cycle_to_date, date_to_cycle


class TestAIRACDateCalculator:
    """Test cases for AIRAC date calculation."""

    def setup_method(self):
        """Set up test fixtures."""
        # October 2, 2025 is a known AIRAC date (Thursday)
        self.calculator = AIRACDateCalculator('2025-10-02')

    def test_initialization_with_invalid_date_format(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            AIRACDateCalculator('2025/10/02')

    def test_initialization_with_non_thursday(self):
        with pytest.raises(ValueError, match="must be a Thursday"):
            AIRACDateCalculator('2025-10-01')

    def test_other_reference_gives_same_dates(self):
        """Any AIRAC date works as the reference."""
        other = AIRACDateCalculator('2017-04-27')
        assert other.cycle_to_date('2510') == '2025-10-02'
        assert other.date_to_cycle('2017-05-10') == '1705'

    @pytest.mark.parametrize('date, expected', [
        ('2025-10-02', True),
        ('2025-10-30', True),
        ('2017-04-27', True),
        ('2025-10-01', False),
        ('2025-10-09', False),
    ])
    def test_is_airac_date(self, date, expected):
        assert self.calculator.is_airac_date(date) is expected

    @pytest.mark.parametrize('date, current, following', [
        ('2025-10-15', '2025-10-02', '2025-10-30'),
        ('2025-10-02', '2025-10-02', '2025-10-30'),
        ('2025-10-01', '2025-09-04', '2025-10-02'),
        ('2017-05-01', '2017-04-27', '2017-05-25'),
    ])
    def test_current_and_next(self, date, current, following):
        assert self.calculator.current_airac_date(date) == current
        assert self.calculator.next_airac_date(date) == following

    def test_accepts_datetime(self):
        assert self.calculator.current_airac_date(datetime(2025, 10, 15, 12, 30)) == '2025-10-02'

    @pytest.mark.parametrize('cycle, date', [
        ('2510', '2025-10-02'),
        ('2501', '2025-01-23'),
        (1705, '2017-04-27'),
        ('2014', '2020-12-31'),
        ('2101', '2021-01-28'),
    ])
    def test_cycle_to_date(self, cycle, date):
        assert self.calculator.cycle_to_date(cycle) == date

    @pytest.mark.parametrize('cycle', ['2114', '2500', '25A1', '25100'])
    def test_invalid_cycle(self, cycle):
        with pytest.raises(ValueError):
            self.calculator.cycle_to_date(cycle)

    @pytest.mark.parametrize('date, cycle', [
        ('2025-10-15', '2510'),
        ('2025-01-22', '2413'),
        ('2025-01-23', '2501'),
        ('2020-12-31', '2014'),
        ('2021-01-27', '2014'),
    ])
    def test_date_to_cycle(self, date, cycle):
        assert self.calculator.date_to_cycle(date) == cycle

    def test_round_trip_over_years(self):
        for year in range(17, 27):
            for number in range(1, 14):
                cycle = f"{year:02d}{number:02d}"
                assert self.calculator.date_to_cycle(self.calculator.cycle_to_date(cycle)) == cycle


def test_module_helpers():
    assert cycle_to_date('2510') == '2025-10-02'
    assert date_to_cycle('2025-10-15') == '2510'
