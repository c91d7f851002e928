"""Tests for the entitydiff comparison engine."""

import pytest
from entitydiff import (
    ArrayMatching,
    ComparisonEngine,
    ComparisonMode,
    CompareOptions,
    DiffType,
    Entity,
    compare_documents,
    compare_values,
    extract_entities,
    run_comparison,
)


class TestScenarios:
    """Reference scenarios for the engine."""

    def test_identical_documents(self):
        """Test that identical documents produce no differences."""
        result = compare_documents({"x": 1}, {"x": 1})
        assert result.differences == []
        assert result.summary.total_differences == 0
        assert result.summary.added == 0
        assert result.summary.deleted == 0
        assert result.summary.modified == 0
        assert result.is_match is True

    def test_modified_value(self):
        """Test that a changed value yields one modified difference."""
        diffs = compare_values({"x": 1}, {"x": 2}, "")
        assert len(diffs) == 1
        assert diffs[0].type == DiffType.MODIFIED
        assert diffs[0].path == "x"
        assert diffs[0].old_value == 1
        assert diffs[0].new_value == 2

    def test_renamed_key(self):
        """Test that a renamed key is a deletion plus an addition."""
        diffs = compare_values({"x": 1}, {"y": 1}, "")
        assert [(d.type, d.path, d.value) for d in diffs] == [
            (DiffType.DELETED, "x", 1),
            (DiffType.ADDED, "y", 1),
        ]

    def test_reordered_array_ignore_order(self):
        """Test that reordered arrays are equal in ignore-order mode."""
        options = CompareOptions(mode=ComparisonMode.IGNORE_ORDER)
        assert compare_values([1, 2, 3], [3, 2, 1], "items", options) is None

    def test_numeric_tolerance(self):
        """Test that numbers within tolerance are equal."""
        options = CompareOptions(numeric_tolerance=0.5)
        result = compare_documents({"x": 10.2}, {"x": 10.6}, options=options)
        assert result.differences == []

    def test_array_path_extraction(self):
        """Test extraction of users by users[].id."""
        document = {"users": [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}]}
        entities = extract_entities(document, "users[].id")
        assert [e.id for e in entities] == [1, 2]
        assert entities[0].data == {"id": 1, "name": "A"}
        assert entities[1].data == {"id": 2, "name": "B"}


class TestEntityMatching:
    """Test matching of entities by id."""

    def setup_method(self):
        self.engine = ComparisonEngine()

    def test_matched_and_orphans(self):
        """Test matched pairs and entities present on one side only."""
        old = {"users": [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}]}
        new = {"users": [{"id": 2, "name": "B"}, {"id": 3, "name": "C"}]}

        result = self.engine.compare_documents(old, new, "users[].id")

        assert [m.id for m in result.matched] == ["2"]
        assert [e.id for e in result.only_in_first] == [1]
        assert [e.id for e in result.only_in_second] == [3]
        assert [(d.type, d.path) for d in result.differences] == [
            (DiffType.DELETED, "ID: 1"),
            (DiffType.ADDED, "ID: 3"),
        ]
        assert result.differences[0].value == {"id": 1, "name": "A"}

    def test_paths_start_with_entity_id(self):
        """Test that nested differences are rooted at the entity id."""
        old = [{"id": 7, "profile": {"city": "Oslo"}}]
        new = [{"id": 7, "profile": {"city": "Bergen"}}]

        result = self.engine.compare_documents(old, new, "id")

        assert len(result.differences) == 1
        assert result.differences[0].path == "7.profile.city"

    def test_last_entity_with_same_id_wins(self):
        """Test that duplicate ids keep the later entity."""
        entities1 = [Entity(1, {"v": 1}), Entity(1, {"v": 2})]
        entities2 = [Entity(1, {"v": 2})]

        result = self.engine.run_comparison(entities1, entities2)

        assert len(result.matched) == 1
        assert result.matched[0].json1 == {"v": 2}
        assert result.differences == []

    def test_ids_are_matched_as_strings(self):
        """Test that numeric and string ids with the same text match."""
        result = self.engine.run_comparison(
            [Entity(1, {"a": 1}), Entity(True, {"b": 1}), Entity(None, {"c": 1})],
            [Entity("1", {"a": 1}), Entity("true", {"b": 1}), Entity("null", {"c": 1})],
        )
        assert sorted(m.id for m in result.matched) == ["1", "null", "true"]
        assert result.only_in_first == []
        assert result.only_in_second == []

    def test_scalar_payloads(self):
        """Test that non-object payloads are compared as values."""
        result = self.engine.run_comparison([Entity("a", 5)], [Entity("a", 6)])
        assert len(result.differences) == 1
        assert result.differences[0].path == "a"
        assert result.differences[0].type == DiffType.MODIFIED

    def test_extraction_failure_falls_back_to_root(self):
        """Test that an unresolvable id path compares whole documents."""
        result = self.engine.compare_documents({"x": 1}, {"x": 2}, "missing[].id")

        assert [m.id for m in result.matched] == ["root"]
        assert result.differences[0].path == "root.x"

    def test_blank_id_path_uses_root(self):
        """Test that a blank id path compares whole documents."""
        result = self.engine.compare_documents({"x": 1}, {"x": 1}, "  ")
        assert [m.id for m in result.matched] == ["root"]
        assert result.summary.equal == 1

    def test_timing_recorded(self):
        """Test that timing counts compared objects."""
        result = run_comparison([Entity(1, {})], [Entity(1, {}), Entity(2, {})])
        assert result.timing.objects_compared == 3
        assert result.timing.duration_ms >= 0


class TestSummary:
    """Test summary statistics."""

    def setup_method(self):
        self.engine = ComparisonEngine()

    def test_counts_by_kind(self):
        """Test that each difference kind is counted."""
        old = [{"id": 1, "a": 1, "b": 2}, {"id": 2}]
        new = [{"id": 1, "a": 5, "c": 3}, {"id": 3}]

        result = self.engine.compare_documents(old, new, "id")

        assert result.summary.modified == 1
        assert result.summary.deleted == 2
        assert result.summary.added == 2
        assert result.summary.total_differences == len(result.differences) == 5

    def test_equal_counts_clean_pairs(self):
        """Test that equal counts matched pairs with no differences."""
        old = [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}]
        new = [{"id": 1, "v": "a"}, {"id": 2, "v": "c"}]

        result = self.engine.compare_documents(old, new, "id")

        assert result.summary.equal == 1
        assert result.summary.modified == 1

    def test_to_dict_shape(self):
        """Test the serialized result shape."""
        result = self.engine.compare_documents({"x": 1}, {"x": 2})
        data = result.to_dict()

        assert data["summary"] == {
            "totalDifferences": 1,
            "added": 0,
            "deleted": 0,
            "modified": 1,
            "equal": 0,
        }
        assert data["differences"] == [
            {"type": "modified", "path": "root.x", "oldValue": 1, "newValue": 2}
        ]
        assert data["matched"] == [{"id": "root", "json1": {"x": 1}, "json2": {"x": 2}}]
        assert data["options"]["arrayMatching"] == "index"


class TestPathFiltering:
    """Test include/exclude filtering of the difference list."""

    def test_include_paths(self):
        """Test that include patterns keep only matching paths."""
        options = CompareOptions(include_paths=("$.name",))
        result = compare_documents(
            {"name": "a", "age": 1}, {"name": "b", "age": 2}, options=options
        )
        assert [d.path for d in result.differences] == ["root.name"]
        assert result.summary.total_differences == 1

    def test_exclude_paths(self):
        """Test that exclude patterns drop matching paths."""
        options = CompareOptions(exclude_paths=("meta*",))
        result = compare_documents(
            {"meta": {"rev": 1}, "age": 1}, {"meta": {"rev": 2}, "age": 2}, options=options
        )
        assert [d.path for d in result.differences] == ["root.age"]

    def test_include_wins_over_exclude(self):
        """Test that include patterns take precedence."""
        options = CompareOptions(include_paths=("age",), exclude_paths=("age",))
        result = compare_documents({"age": 1}, {"age": 2}, options=options)
        assert len(result.differences) == 1

    def test_filter_applies_to_orphans(self):
        """Test that orphan records are filtered too."""
        options = CompareOptions(exclude_paths=("ID:",))
        result = compare_documents([{"id": 1}], [{"id": 2}], "id", options)
        assert result.differences == []
        assert len(result.only_in_first) == 1

    def test_filtered_pair_counts_as_equal(self):
        """Test that a pair whose differences are all filtered counts as equal."""
        options = CompareOptions(exclude_paths=("rev",))
        result = compare_documents([{"id": 1, "rev": 1}], [{"id": 1, "rev": 2}], "id", options)
        assert result.summary.equal == 1


class TestProperties:
    """Test general properties of the engine."""

    documents = [
        None,
        True,
        0,
        3.5,
        "Text",
        [],
        [1, "a", None, {"k": [1, 2]}],
        {},
        {"a": {"b": [1, {"c": "d"}]}, "created_at": "2025-01-01", "n": None},
    ]

    option_sets = [
        CompareOptions(),
        CompareOptions(mode=ComparisonMode.TYPE),
        CompareOptions(mode=ComparisonMode.IGNORE_ORDER),
        CompareOptions.from_dict({"arrayMatching": "hash", "caseSensitive": False}),
        CompareOptions.from_dict({"arrayMatching": "id", "mode": "ignore-order"}),
        CompareOptions.from_dict({"arrayMatching": "best_match", "normalizeStrings": True}),
        CompareOptions(ignore_timestamps=True, numeric_tolerance=0.1, ignore_extra_keys=True),
    ]

    @pytest.mark.parametrize("document", documents)
    @pytest.mark.parametrize("options", option_sets)
    def test_reflexive(self, document, options):
        """Test that every document equals itself."""
        assert compare_values(document, document, "p", options) is None

    @pytest.mark.parametrize("old,new", [
        (1, 2),
        ("a", "b"),
        (None, 0),
        ([1], [2]),
        ({"a": 1}, [1]),
        (True, 1),
    ])
    def test_detection_is_symmetric(self, old, new):
        """Test that swapping operands swaps old and new."""
        forward = compare_values(old, new, "p")
        backward = compare_values(new, old, "p")
        assert forward.type == backward.type == DiffType.MODIFIED
        assert (forward.old_value, forward.new_value) == (backward.new_value, backward.old_value)

    def test_idempotent(self):
        """Test that repeated runs give identical results."""
        old = {"users": [{"id": 1, "tags": ["a"]}, {"id": 2}]}
        new = {"users": [{"id": 1, "tags": ["b"]}, {"id": 3}]}
        engine = ComparisonEngine()

        first = engine.compare_documents(old, new, "users[].id").to_dict()
        second = engine.compare_documents(old, new, "users[].id").to_dict()
        first.pop("timing")
        second.pop("timing")

        assert first == second

    def test_inputs_not_mutated(self):
        """Test that documents are never modified."""
        old = {"users": [{"id": 1, "tags": ["b", "a"]}]}
        new = {"users": [{"id": 1, "tags": ["a", "b"]}]}
        snapshot = repr((old, new))

        compare_documents(old, new, "users[].id", CompareOptions(array_matching=ArrayMatching.HASH))

        assert repr((old, new)) == snapshot

    def test_ids_partitioned(self):
        """Test that every id lands in exactly one bucket."""
        entities1 = [Entity(i, {"v": i}) for i in (1, 2, 3, 4)]
        entities2 = [Entity(i, {"v": i}) for i in (3, 4, 5)]

        result = run_comparison(entities1, entities2)

        matched = {m.id for m in result.matched}
        first = {str(e.id) for e in result.only_in_first}
        second = {str(e.id) for e in result.only_in_second}
        assert matched | first | second == {"1", "2", "3", "4", "5"}
        assert not (matched & first or matched & second or first & second)
