"""Tests for exporter template rendering."""

import re

import pytest

from collurgy.palette import ExporterRecord, ThemeRecord, compute, export, render
from collurgy.palette.exporter import (
    build_placeholders,
    format_float,
    resolve_extras,
    substitute,
)

GRAMMAR_TOKEN = re.compile(r"\{(?:HEX|FR|FG|FB|R|G|B)(?:[0-9]|1[0-5])\}|\{ACC(?:HEX|FR|FG|FB|R|G|B)\}")


def make_exporter(formatter, extras=None, name="Test"):
    return ExporterRecord(name=name, formatter=formatter, extras=extras or {})


class TestSubstitution:
    """Test placeholder substitution."""

    def test_base_colors(self, default_theme):
        exporter = make_exporter("{HEX0}-{HEX15}")
        assert export(exporter, default_theme) == "000000-FFFFFF"

    def test_every_grammar_token_replaced(self, spectrum_theme):
        suffixes = ("HEX", "R", "G", "B", "FR", "FG", "FB")
        tokens = [f"{{{s}{n}}}" for n in range(16) for s in suffixes]
        tokens += [f"{{ACC{s}}}" for s in suffixes]
        tokens += [f"{{CURSOR{s}}}" for s in suffixes]
        exporter = make_exporter(" ".join(tokens), extras={"CURSOR": 5})

        output = export(exporter, spectrum_theme)
        assert GRAMMAR_TOKEN.search(output) is None
        assert "{" not in output

    def test_channel_values(self, default_theme):
        exporter = make_exporter("{R15},{G15},{B15} {FR0} {HEX15}")
        assert export(exporter, default_theme) == "255,255,255 0.0 FFFFFF"

    def test_float_channels_rounded(self, default_theme):
        palette = compute(default_theme)
        output = export(make_exporter("{FR15}"), default_theme)
        assert output == format_float(palette[15][0])
        assert float(output) == pytest.approx(1.0, abs=1e-3)

    def test_accent_tokens(self, spectrum_theme):
        palette = compute(spectrum_theme)
        exporter = make_exporter("{ACCHEX} {ACCR}")
        expected = f"{palette.hex(4)} {palette.channels8(4)[0]}"
        assert export(exporter, spectrum_theme) == expected

    def test_unknown_tokens_verbatim(self, default_theme):
        template = "{FOO} {HEX16} {ACC} {} {HEX0 } {HEX0"
        exporter = make_exporter(template)
        assert export(exporter, default_theme) == template

    def test_no_partial_match(self, default_theme):
        """{HEX10} is never read as {HEX1} followed by '0'."""
        palette = compute(default_theme)
        output = render(make_exporter("{HEX10}|{HEX1}0"), palette, 11)
        assert output == f"{palette.hex(10)}|{palette.hex(1)}0"

    def test_substitute_single_pass(self):
        assert substitute("{A}{B}", {"A": "{B}", "B": "x"}) == "{B}x"

    def test_name_token(self, default_theme):
        exporter = make_exporter("theme {NAME}")
        assert export(exporter, default_theme, "dusk") == "theme dusk"
        assert export(exporter, default_theme) == "theme {NAME}"

    def test_format_float(self):
        assert format_float(0.123456789) == "0.123457"
        assert format_float(-0.0) == "0.0"
        assert format_float(1.0000000002) == "1.0"


class TestExtras:
    """Test symbolic extras bindings."""

    def test_exporter_defaults(self, default_theme, simple_exporter):
        palette = compute(default_theme)
        output = export(simple_exporter, default_theme)
        assert output == f"bg=000000 fg=FFFFFF cursor={palette.hex(5)}"

    def test_theme_bindings_win(self, simple_exporter):
        theme = ThemeRecord(extras={"Simple": {"CURSOR": 9}})
        palette = compute(theme)
        assert export(simple_exporter, theme).endswith(f"cursor={palette.hex(9)}")

    def test_theme_bindings_replace_wholesale(self):
        exporter = make_exporter("{CURSORHEX} {URLHEX}", extras={"CURSOR": 5, "URL": 12}, name="Simple")
        assert resolve_extras(exporter, {"Simple": {"CURSOR": 9}}) == {"CURSOR": 9}
        assert resolve_extras(exporter, {"Other": {"CURSOR": 9}}) == {"CURSOR": 5, "URL": 12}

        theme = ThemeRecord(extras={"Simple": {"CURSOR": 9}})
        assert export(exporter, theme).endswith(" {URLHEX}")

    def test_invalid_slots_skipped(self, default_theme):
        palette = compute(default_theme)
        table = build_placeholders(palette, 11, {"BAD": 16, "NEG": -1, "OK": 3})
        assert "BADHEX" not in table
        assert "NEGHEX" not in table
        assert table["OKHEX"] == palette.hex(3)

    def test_out_of_range_accent(self, default_theme):
        palette = compute(default_theme)
        output = render(make_exporter("{ACCHEX} {HEX0}"), palette, 16)
        assert output == "{ACCHEX} 000000"

    def test_reserved_tokens_not_shadowed(self, default_theme):
        """Extras never override fixed or accent tokens."""
        palette = compute(default_theme)
        table = build_placeholders(palette, 11, {"ACC": 0, "HEX1": 15}, name="n")
        assert table["ACCR"] == str(palette.channels8(11)[0])
        assert table["ACCHEX"] == palette.hex(11)
        # HEX1 + R is not a reserved token, so it is bound
        assert table["HEX1R"] == "255"
        assert table["HEX1HEX"] == "FFFFFF"
        assert table["HEX1"] == palette.hex(1)

    def test_unplaceable_symbols_skipped(self, default_theme):
        """Names that no placeholder could spell are left out of the table."""
        palette = compute(default_theme)
        table = build_placeholders(palette, 11, {"my cursor": 3, "a{b": 2, "": 1, "CURSOR": 5})
        assert not any(" " in token or "{" in token for token in table)
        assert "HEX" not in table
        assert table["CURSORHEX"] == palette.hex(5)

    def test_bool_slot_rejected(self, default_theme):
        palette = compute(default_theme)
        table = build_placeholders(palette, True, {"FLAG": False})
        assert "ACCHEX" not in table
        assert "FLAGHEX" not in table


class TestBuiltinTemplates:
    """Render the shipped exporters."""

    @pytest.fixture
    def registry(self):
        from collurgy.palette import ExporterRegistry
        return ExporterRegistry(include_builtins=True)

    def test_vim(self, registry, default_theme):
        output = export(registry.get("Vim"), default_theme, "mytheme")
        assert 'let g:colors_name="mytheme"' in output
        assert "'#FFFFFF'" in output
        assert re.search(r"\{[A-Z0-9_]+\}", output) is None

    def test_theme_extras_reach_vim(self, registry, spectrum_theme):
        palette = compute(spectrum_theme)
        output = export(registry.get("Vim"), spectrum_theme, "s")
        # the theme only binds CONSTANT, so the preset's other symbols stay unresolved
        assert palette.hex(9) in output
        assert "{IDENTIFIERHEX}" in output
