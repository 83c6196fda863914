"""Tests for source pattern expansion."""

import logging

import pytest

from hashbundle.patterns import expand_patterns, is_glob, parse_name_list


@pytest.mark.small
class TestExpandPatterns:
    """Tests for expand_patterns."""

    def test_plain_paths_are_joined_to_base(self, tmp_path):
        """Existing plain paths are returned relative to base."""
        (tmp_path / 'js').mkdir()
        (tmp_path / 'js/app.js').write_text('')

        result = expand_patterns(tmp_path, ['js/app.js'])

        assert result == [str(tmp_path / 'js/app.js')]

    def test_missing_plain_path_warns_and_contributes_nothing(self, tmp_path, caplog):
        """A plain path that does not exist is skipped like an empty glob."""
        (tmp_path / 'app.js').write_text('')

        with caplog.at_level(logging.WARNING, logger='hashbundle.patterns'):
            result = expand_patterns(tmp_path, ['app.js', 'missing.js'])

        assert result == [str(tmp_path / 'app.js')]
        assert 'missing.js did not match any files' in caplog.text

    def test_glob_matches_are_sorted_per_pattern(self, tmp_path):
        """Matches of one glob are sorted; pattern order is kept."""
        (tmp_path / 'js').mkdir()
        for name in ['b.js', 'a.js', 'c.css']:
            (tmp_path / 'js' / name).write_text('')

        result = expand_patterns(tmp_path, ['js/*.css', 'js/*.js'])

        assert result == [
            str(tmp_path / 'js' / 'c.css'),
            str(tmp_path / 'js' / 'a.js'),
            str(tmp_path / 'js' / 'b.js'),
        ]

    def test_empty_glob_warns_and_contributes_nothing(self, tmp_path, caplog):
        """A glob with no matches is a warning, not an error."""
        with caplog.at_level(logging.WARNING, logger='hashbundle.patterns'):
            result = expand_patterns(tmp_path, ['nothing/*.js'])

        assert result == []
        assert 'did not match any files' in caplog.text

    def test_duplicates_are_kept(self, tmp_path):
        """Expansion does not deduplicate; the builder does."""
        (tmp_path / 'a.js').write_text('')

        assert len(expand_patterns(tmp_path, ['a.js', 'a.js'])) == 2

    @pytest.mark.parametrize(('pattern', 'expected'), [('*.js', True), ('a?.js', True), ('[ab].js', True), ('a.js', False)])
    def test_is_glob(self, pattern, expected):
        """Only patterns with metacharacters are globs."""
        assert is_glob(pattern) is expected


@pytest.mark.small
class TestParseNameList:
    """Tests for parse_name_list."""

    def test_splits_and_trims(self):
        """Names are split on commas and trimmed."""
        assert parse_name_list('a.js,  b.js ,c.js') == ['a.js', 'b.js', 'c.js']

    def test_blank_input(self):
        """Blank input yields no names."""
        assert parse_name_list(' , ') == []
