"""Tests for the ordered fingerprint map and manifest hashing."""

import hashlib

import pytest

from hashbundle.manifest import FingerprintMap, dedupe


@pytest.mark.small
class TestFingerprintMap:
    """Tests for FingerprintMap."""

    def test_empty_map_has_no_keys(self):
        """A new map is empty and reports nothing as existing."""
        fingerprints = FingerprintMap()

        assert len(fingerprints) == 0
        assert not fingerprints.exists('a.js')
        assert fingerprints.index_of('a.js') == (0, False)

    def test_set_appends_new_keys_in_order(self):
        """New keys are appended in insertion order."""
        fingerprints = FingerprintMap()
        fingerprints.set('b.js', '2')
        fingerprints.set('a.js', '1')

        assert fingerprints.keys() == ['b.js', 'a.js']
        assert fingerprints.index_of('a.js') == (1, True)

    def test_set_existing_key_updates_in_place(self):
        """Setting a known key changes its value but not its position."""
        fingerprints = FingerprintMap()
        fingerprints.set('a.js', '')
        fingerprints.set('b.js', '')
        fingerprints.set('a.js', 'aaaa')

        assert fingerprints.keys() == ['a.js', 'b.js']
        assert fingerprints.get('a.js') == 'aaaa'
        assert len(fingerprints) == 2

    def test_get_missing_returns_none(self):
        """get returns None for keys never set."""
        assert FingerprintMap().get('missing') is None

    def test_contains_matches_exists(self):
        """The in operator agrees with exists."""
        fingerprints = FingerprintMap()
        fingerprints.set('a.js', '')

        assert 'a.js' in fingerprints
        assert 'b.js' not in fingerprints

    def test_repeated_set_preserves_first_seen_order(self):
        """Re-ordered duplicates never change the first-seen order."""
        fingerprints = FingerprintMap()
        for key in ['c', 'a', 'b', 'a', 'c', 'b', 'a']:
            fingerprints.set(key, key * 2)

        assert fingerprints.keys() == ['c', 'a', 'b']

    def test_serialize_is_compact_ordered_json(self):
        """serialize emits Key/Value objects in order with no whitespace."""
        fingerprints = FingerprintMap()
        fingerprints.set('b.js', 'bb')
        fingerprints.set('a.js', 'aa')

        assert fingerprints.serialize() == b'[{"Key":"b.js","Value":"bb"},{"Key":"a.js","Value":"aa"}]'

    def test_serialize_keeps_non_ascii_paths_as_utf8(self):
        """Non-ASCII paths are written as UTF-8, not escaped."""
        fingerprints = FingerprintMap()
        fingerprints.set('vues/é.js', 'x')

        assert 'vues/é.js'.encode() in fingerprints.serialize()

    def test_empty_manifest_serializes_as_null(self):
        """An empty manifest is written as JSON null and hashes to a fixed digest."""
        fingerprints = FingerprintMap()

        assert fingerprints.serialize() == b'null'
        assert fingerprints.digest() == hashlib.sha1(b'null').hexdigest()
        assert fingerprints.digest() == '2be88ca4242c76e8253ac62474851065032d6833'

    def test_serialize_escapes_html_characters(self):
        """Angle brackets, ampersands and line separators are written as \\u escapes."""
        fingerprints = FingerprintMap()
        fingerprints.set('a&b<c>\u2028\u2029.js', 'x')

        assert fingerprints.serialize() == (
            b'[{"Key":"a\\u0026b\\u003cc\\u003e\\u2028\\u2029.js","Value":"x"}]'
        )

    def test_serialize_keeps_undecodable_path_bytes(self):
        """A path decoded from invalid UTF-8 serializes back to its raw bytes."""
        fingerprints = FingerprintMap()
        fingerprints.set(b'bad\xff.js'.decode('utf-8', 'surrogateescape'), 'x')

        assert fingerprints.serialize() == b'[{"Key":"bad\xff.js","Value":"x"}]'
        assert len(fingerprints.digest()) == 40

    def test_digest_depends_on_order(self):
        """Same entries in a different order give a different digest."""
        first = FingerprintMap()
        first.set('a', '1')
        first.set('b', '2')
        second = FingerprintMap()
        second.set('b', '2')
        second.set('a', '1')

        assert first.digest() != second.digest()


@pytest.mark.small
class TestDedupe:
    """Tests for dedupe."""

    def test_keeps_first_occurrence(self):
        """Later duplicates are dropped; first positions are kept."""
        assert dedupe(['a', 'b', 'a', 'c', 'b']) == ['a', 'b', 'c']

    def test_empty_list(self):
        """Deduplicating nothing gives nothing."""
        assert dedupe([]) == []
