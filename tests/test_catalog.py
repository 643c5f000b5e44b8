"""Tests for the bundled exercise catalog and YAML loading."""
import pytest

from drift.catalog import exercises_for, find_exercise, load_catalog, parse_exercise
from drift.errors import ConfigurationError
from drift.models import Equipment, ExerciseType, LoadType, MuscleGroup, Slot


class TestBundledCatalog:

    def test_every_group_and_slot_covered(self, full_catalog):
        for group in MuscleGroup:
            for slot in Slot:
                assert exercises_for(full_catalog, group, slot), f"{group.value} slot {slot.value} empty"

    def test_bodyweight_exercises_have_multiplier(self, full_catalog):
        for ex in full_catalog:
            if ex.equipment == Equipment.BODYWEIGHT:
                assert ex.bodyweight_multiplier is not None, ex.id

    def test_compounds_and_isolations_tagged(self, full_catalog):
        for ex in full_catalog:
            if ex.type == ExerciseType.COMPOUND:
                assert ex.movement_pattern is not None and ex.primary_muscle is None
            else:
                assert ex.primary_muscle is not None and ex.movement_pattern is None

    def test_find_exercise(self, full_catalog):
        db_bench = find_exercise(full_catalog, 'db_bench')
        assert db_bench.load_type == LoadType.UNILATERAL
        assert find_exercise(full_catalog, 'nope') is None


class TestParsing:

    @pytest.fixture
    def entry(self):
        return {
            'id': 'barbell_bench', 'name': 'Barbell Bench Press', 'muscle_group': 'push', 'slot': 1,
            'type': 'compound', 'equipment': 'barbell', 'load_type': 'bilateral', 'rep_range': [5, 8],
            'movement_pattern': 'horizontalPush',
        }

    def test_parse(self, entry):
        ex = parse_exercise(entry)
        assert ex.slot == Slot.HEAVY
        assert ex.rep_range == (5, 8)

    def test_missing_field(self, entry):
        del entry['equipment']
        with pytest.raises(ConfigurationError, match="equipment"):
            parse_exercise(entry)

    def test_unknown_enum(self, entry):
        entry['equipment'] = 'kettlebell'
        with pytest.raises(ConfigurationError):
            parse_exercise(entry)

    def test_compound_without_pattern(self, entry):
        del entry['movement_pattern']
        with pytest.raises(ConfigurationError):
            parse_exercise(entry)

    def test_compound_with_primary_muscle(self, entry):
        entry['primary_muscle'] = 'chest'
        with pytest.raises(ConfigurationError, match="primary muscle"):
            parse_exercise(entry)

    def test_isolation_with_movement_pattern(self, entry):
        entry.update(type='isolation', slot=3, rep_range=[12, 15], primary_muscle='chest')
        with pytest.raises(ConfigurationError, match="movement pattern"):
            parse_exercise(entry)

    def test_duplicate_ids(self, tmp_path, entry):
        path = tmp_path / 'catalog.yaml'
        path.write_text(
            "- {id: a, name: A, muscle_group: push, slot: 1, type: compound, equipment: barbell,"
            " load_type: bilateral, rep_range: [5, 8], movement_pattern: horizontalPush}\n"
            "- {id: a, name: A, muscle_group: push, slot: 1, type: compound, equipment: barbell,"
            " load_type: bilateral, rep_range: [5, 8], movement_pattern: horizontalPush}\n"
        )
        with pytest.raises(ConfigurationError, match="Duplicate"):
            load_catalog(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / 'catalog.yaml'
        path.write_text("exercises: {}\n")
        with pytest.raises(ConfigurationError):
            load_catalog(path)

    def test_entry_not_a_mapping(self, tmp_path):
        path = tmp_path / 'catalog.yaml'
        path.write_text("- barbell_bench\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_catalog(path)
