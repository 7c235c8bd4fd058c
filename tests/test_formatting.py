"""Unit tests for display helpers and form settings."""

import pytest

from leadform.config import FormSettings
from leadform.formatting import budget_range_label, chip_label, format_currency
from leadform.types import Purpose, Rooms, SquareMeters


class TestFormatCurrency:
    """Test currency formatting."""

    @pytest.mark.parametrize("value,expected", [
        (0, "$ 0"),
        (999, "$ 999"),
        (1000, "$ 1,000"),
        (200000, "$ 200,000"),
        (3000000, "$ 3,000,000"),
        (5000000, "$ 5,000,000"),
        (1234567890, "$ 1,234,567,890"),
    ])
    def test_groups_thousands(self, value, expected):
        """Should prefix '$ ' and group digits by three with commas."""
        assert format_currency(value) == expected

    def test_budget_range_label_shows_upper_bound_first(self):
        """Should render max first, then min."""
        assert budget_range_label(200000, 5000000) == "$ 5,000,000 - $ 200,000"


class TestChipLabel:
    """Test chip label rendering."""

    def test_last_option_gets_plus_prefix(self):
        """The last option of a group should read as 'or more'."""
        assert chip_label(SquareMeters.SQM_200) == "+200"
        assert chip_label(Rooms.SIX) == "+6"

    def test_other_options_are_plain(self):
        """Other options should render their value."""
        assert [chip_label(o) for o in SquareMeters][:3] == ["90", "88", "150"]
        assert chip_label(Rooms.ONE) == "1"

    def test_plain_ints(self):
        """A bare int should render as is."""
        assert chip_label(6) == "6"


class TestFormSettings:
    """Test FormSettings defaults, validation and serialization."""

    def test_defaults(self):
        """Defaults should match the fixed slider domain and text set."""
        settings = FormSettings()

        assert settings.budget_min == 200000
        assert settings.budget_max_floor == 200000
        assert settings.budget_max_ceiling == 5000000
        assert settings.budget_step == 50000
        assert settings.default_budget_max == 5000000
        assert settings.default_purpose is Purpose.RESIDENCE
        assert settings.letters_only_message == "ניתן להזין אותיות בלבד"

    def test_slider_values(self):
        """slider_values() should step from floor to ceiling inclusive."""
        values = list(FormSettings().slider_values())

        assert values[0] == 200000
        assert values[-1] == 5000000
        assert len(values) == 97
        assert 3000000 in values

    def test_rejects_non_positive_step(self):
        """A zero step should be refused."""
        with pytest.raises(ValueError, match="budget_step"):
            FormSettings(budget_step=0)

    def test_rejects_inverted_domain(self):
        """A floor above the ceiling should be refused."""
        with pytest.raises(ValueError, match="exceeds"):
            FormSettings(budget_max_floor=6000000)

    @pytest.mark.parametrize("value", [100, 150000, 5050000])
    def test_rejects_default_budget_outside_slider(self, value):
        """A starting budget outside the slider range should be refused."""
        with pytest.raises(ValueError, match="default_budget_max"):
            FormSettings(default_budget_max=value)

    def test_rejects_default_budget_off_step(self):
        """A starting budget between two slider positions should be refused."""
        with pytest.raises(ValueError, match="grid"):
            FormSettings(default_budget_max=1025000)

    def test_rejects_budget_min_above_slider(self):
        """budget_min above the lowest slider position should be refused."""
        with pytest.raises(ValueError, match="budget_min"):
            FormSettings(budget_min=250000)

    def test_rejects_invalid_default_from_environment(self, monkeypatch):
        """An out-of-range LEADFORM_DEFAULT_BUDGET_MAX should be refused."""
        monkeypatch.setenv("LEADFORM_DEFAULT_BUDGET_MAX", "100")

        with pytest.raises(ValueError):
            FormSettings()

    def test_string_purpose_is_coerced(self):
        """A raw purpose value should become a Purpose member."""
        assert FormSettings(default_purpose="השכרה").default_purpose is Purpose.RENTAL

    def test_round_trip(self):
        """from_dict should invert to_dict."""
        settings = FormSettings(default_budget_max=1000000, invalid_email_message="Invalid email")

        assert FormSettings.from_dict(settings.to_dict()) == settings

    def test_from_dict_partial(self):
        """Missing keys should keep their defaults."""
        settings = FormSettings.from_dict({"budgetStep": 100000})

        assert settings.budget_step == 100000
        assert settings.budget_min == 200000

    def test_environment_override(self, monkeypatch):
        """LEADFORM_ variables should override defaults."""
        monkeypatch.setenv("LEADFORM_BUDGET_STEP", "100000")
        monkeypatch.setenv("LEADFORM_INVALID_EMAIL_MESSAGE", "Invalid email")

        settings = FormSettings()

        assert settings.budget_step == 100000
        assert settings.invalid_email_message == "Invalid email"

    def test_settings_are_immutable(self):
        """Settings should be frozen once built."""
        settings = FormSettings()

        with pytest.raises(Exception):
            settings.budget_step = 1
