"""Tests for DiffHashService."""

from iflow_parser.diff_hash import DiffHashService


class TestDiffHashService:
    """Tests for content hashing."""

    def test_generate_hash_returns_hex_string(self):
        result = DiffHashService.generate_hash({'name': 'HTTPS_IN'})
        assert isinstance(result, str)
        assert len(result) == 128  # SHA-512 hex

    def test_same_data_same_hash(self):
        data = {'name': 'HTTPS_IN', 'direction': 'Sender'}
        assert DiffHashService.generate_hash(data) == DiffHashService.generate_hash(data)

    def test_different_data_different_hash(self):
        h1 = DiffHashService.generate_hash({'name': 'HTTPS_IN'})
        h2 = DiffHashService.generate_hash({'name': 'ODATA_OUT'})
        assert h1 != h2

    def test_version_does_not_affect_hash(self):
        h1 = DiffHashService.generate_hash({'name': 'Flow', 'version': '1.0.0'})
        h2 = DiffHashService.generate_hash({'name': 'Flow', 'version': '1.0.1'})
        assert h1 == h2

    def test_excludes_all_excluded_fields(self):
        base = {'name': 'Flow'}
        for field in DiffHashService.EXCLUDED_FIELDS:
            with_field = {**base, field: 'some_value'}
            assert DiffHashService.generate_hash(base) == DiffHashService.generate_hash(with_field)

    def test_nested_version_is_content(self):
        h1 = DiffHashService.generate_hash({'configuration': {'version': '2.0'}})
        h2 = DiffHashService.generate_hash({'configuration': {'version': '3.0'}})
        assert h1 != h2

    def test_nested_timestamps_are_content(self):
        h1 = DiffHashService.generate_hash({'details': [{'name': 'a', 'updated_at': '1'}]})
        h2 = DiffHashService.generate_hash({'details': [{'name': 'a', 'updated_at': '2'}]})
        assert h1 != h2

    def test_order_independent_keys(self):
        h1 = DiffHashService.generate_hash({'a': 1, 'b': 2})
        h2 = DiffHashService.generate_hash({'b': 2, 'a': 1})
        assert h1 == h2

    def test_tuple_and_list_hash_alike(self):
        assert DiffHashService.generate_hash({'items': (1, 2)}) == DiffHashService.generate_hash({'items': [1, 2]})

    def test_hash_records_preserves_order(self):
        records = [{'name': 'A'}, {'name': 'B'}]
        hashes = DiffHashService.hash_records(records)
        assert hashes == [DiffHashService.generate_hash(r) for r in records]
