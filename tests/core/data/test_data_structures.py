"""
Unit tests for core data structures.

Tests modifiers, roll bonuses, dice notation and the authored-data
conversion helpers.
"""

import importlib

import pytest

from src.core.data.data_structures import AttributeModifier, DataConverter, DiceFormula, RollBonus
from src.core.data.game_enums import (
    Attribute,
    CheckKind,
    EntityFeature,
    ModifierCategory,
    ModifierType,
    ResistanceLevel,
)


class TestAttributeModifier:
    """Test AttributeModifier identity and labels."""

    def test_equality_is_identity(self):
        """Two modifiers with the same values are still distinct."""
        first = AttributeModifier(Attribute.ARMOR_CLASS, ModifierType.FLAT, 2)
        second = AttributeModifier(Attribute.ARMOR_CLASS, ModifierType.FLAT, 2)

        assert first != second
        assert first == first

    def test_dispellable_categories(self):
        """Status effect and aura modifiers are dispellable, equipment is not."""
        status = AttributeModifier(Attribute.SPEED, ModifierType.FLAT, 1, category=ModifierCategory.STATUS_EFFECT)
        aura = AttributeModifier(Attribute.SPEED, ModifierType.FLAT, 1, category=ModifierCategory.AURA)
        equipment = AttributeModifier(Attribute.SPEED, ModifierType.FLAT, 1, category=ModifierCategory.EQUIPMENT)

        assert status.is_dispellable
        assert aura.is_dispellable
        assert not equipment.is_dispellable

    def test_display_name_prefers_label_then_source(self):
        """Labels win, then the source's name, then the category."""
        class Source:
            name = "Armor Plating"

        labelled = AttributeModifier(Attribute.ARMOR_CLASS, ModifierType.FLAT, 2, source=Source(), label="Plating")
        sourced = AttributeModifier(Attribute.ARMOR_CLASS, ModifierType.FLAT, 2, source=Source())
        bare = AttributeModifier(Attribute.ARMOR_CLASS, ModifierType.FLAT, 2, category=ModifierCategory.STATUS_EFFECT)

        assert labelled.display_name == "Plating"
        assert sourced.display_name == "Armor Plating"
        assert bare.display_name == "Status Effect"


class TestRollBonus:
    """Test RollBonus formatting and conversion."""

    def test_str_is_signed(self):
        assert str(RollBonus("Dexterity Modifier", 3)) == "+3 Dexterity Modifier"
        assert str(RollBonus("Targeting Penalty", -5)) == "-5 Targeting Penalty"

    def test_from_modifier_rounds_value(self):
        """Fractional modifier values round to whole roll bonuses."""
        modifier = AttributeModifier(Attribute.ATTACK_BONUS, ModifierType.FLAT, 1.6, label="Blessed")

        bonus = RollBonus.from_modifier(modifier)

        assert bonus == RollBonus("Blessed", 2)


class TestDiceFormula:
    """Test dice notation parsing and formatting."""

    @pytest.mark.parametrize("notation,expected", [
        ("2d6+3", DiceFormula(2, 6, 3)),
        ("1d8", DiceFormula(1, 8, 0)),
        ("d8", DiceFormula(1, 8, 0)),
        ("1d4-1", DiceFormula(1, 4, -1)),
        ("3D10 + 2", DiceFormula(3, 10, 2)),
        ("5", DiceFormula(0, 6, 5)),
        (5, DiceFormula(0, 6, 5)),
        ("-2", DiceFormula(0, 6, -2)),
    ])
    def test_parse(self, notation, expected):
        """Standard notations parse into count, size and bonus."""
        assert DiceFormula.parse(notation) == expected

    @pytest.mark.parametrize("notation", ["", "abc", "2d", "d", "1d6+x"])
    def test_parse_rejects_garbage(self, notation):
        with pytest.raises(ValueError):
            DiceFormula.parse(notation)

    def test_notation(self):
        """Formatting drops zero bonuses and shows flat values plainly."""
        assert DiceFormula(2, 6, 3).notation() == "2d6+3"
        assert DiceFormula(1, 8, 0).notation() == "1d8"
        assert DiceFormula(1, 4, -1).notation() == "1d4-1"
        assert DiceFormula(0, 6, 5).notation() == "5"

    def test_empty_formula(self):
        """A formula with no dice and no bonus can never produce a value."""
        assert DiceFormula(0, 6, 0).is_empty
        assert not DiceFormula(0, 6, 2).is_empty
        assert not DiceFormula(1, 6, 0).is_empty
        assert not DiceFormula(0, 6, 2).has_dice


class TestPackageExports:
    """Test that package re-exports point at real definitions."""

    @pytest.mark.parametrize("package", ["src.core.data", "src.core.entities"])
    def test_every_exported_name_resolves(self, package):
        module = importlib.import_module(package)

        missing = [name for name in module.__all__ if not hasattr(module, name)]

        assert missing == []


class TestDataConverter:
    """Test enum parsing from authored names."""

    @pytest.mark.parametrize("name", ["armor_class", "ArmorClass", "ARMOR CLASS", "armor-class"])
    def test_parse_enum_accepts_spellings(self, name):
        assert DataConverter.parse_enum(Attribute, name) == Attribute.ARMOR_CLASS

    def test_parse_enum_passes_members_through(self):
        assert DataConverter.parse_enum(CheckKind, CheckKind.SAVE) == CheckKind.SAVE

    def test_parse_enum_unknown_lists_valid_names(self):
        with pytest.raises(ValueError, match="resistant"):
            DataConverter.parse_enum(ResistanceLevel, "armored")

    def test_parse_enum_rejects_non_strings(self):
        with pytest.raises(ValueError):
            DataConverter.parse_enum(ResistanceLevel, 3)

    def test_parse_flags_combines(self):
        flags = DataConverter.parse_flags(EntityFeature, ["has_health", "is_flammable"])

        assert flags == EntityFeature.HAS_HEALTH | EntityFeature.IS_FLAMMABLE
        assert DataConverter.parse_flags(EntityFeature, None) == EntityFeature.NONE
        assert DataConverter.parse_flags(EntityFeature, "has_energy") == EntityFeature.HAS_ENERGY
