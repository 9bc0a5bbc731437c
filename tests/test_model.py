"""Test the combat model formulas."""
import itertools

import pytest
from combat.model import (
    END_FIGHT_HEAL_AMOUNT, RANGED_MELEE_MULT, Class, Element, Unit, UnitView,
)


def test_class_constants_are_pinned():
    """Class balancing numbers must not drift."""
    assert Class.MELEE.base_hp() == 0.7
    assert Class.MELEE.base_damage() == 1.0
    assert Class.MELEE.base_block() == 0.05
    assert Class.MELEE.base_regen() == 0.3
    assert Class.RANGED.base_hp() == 1.0
    assert Class.RANGED.base_damage() == 1.45
    assert Class.RANGED.base_block() == 0.0
    assert Class.RANGED.base_regen() == 0.2


def test_tuning_constants():
    assert RANGED_MELEE_MULT == 0.25
    assert END_FIGHT_HEAL_AMOUNT == 0.2


def test_element_multipliers():
    """Blue is neutral; Red and Green trade hp for damage."""
    assert Element.BLUE.hp_mult() == 1.0
    assert Element.BLUE.damage_mult() == 1.0
    assert Element.RED.hp_mult() == 5.0 / 6.0
    assert Element.RED.damage_mult() == 6.0 / 5.0
    assert Element.GREEN.hp_mult() == 6.0 / 5.0
    assert Element.GREEN.damage_mult() == 5.0 / 6.0
    assert Element.RED.hp_mult() == Element.GREEN.damage_mult()
    assert Element.GREEN.hp_mult() == Element.RED.damage_mult()


def test_damage_vs_matrix():
    """Red beats Green, Green beats Blue, Blue beats Red."""
    assert Element.RED.damage_vs(Element.GREEN) == 1.5
    assert Element.GREEN.damage_vs(Element.BLUE) == 1.5
    assert Element.BLUE.damage_vs(Element.RED) == 1.5
    assert Element.RED.damage_vs(Element.BLUE) == 2.0 / 3.0
    assert Element.GREEN.damage_vs(Element.RED) == 2.0 / 3.0
    assert Element.BLUE.damage_vs(Element.GREEN) == 2.0 / 3.0


@pytest.mark.parametrize("a,b", list(itertools.product(Element, Element)))
def test_damage_vs_is_symmetric(a, b):
    """Advantage one way is exactly offset by disadvantage the other way."""
    assert a.damage_vs(b) * b.damage_vs(a) == pytest.approx(1.0)
    if a == b:
        assert a.damage_vs(b) == 1.0


def test_unknown_view_is_neutral():
    view = UnitView.new()
    assert view.hp() == 1.0
    assert view.max_hp() == 1.0
    assert view.damage() == 1.0


def test_partial_view():
    """Fields are independent: class without element and the other way round."""
    only_class = UnitView(unit_class=Class.MELEE)
    assert only_class.max_hp() == 0.7
    assert only_class.damage() == 1.0

    only_element = UnitView(element=Element.GREEN, frac_hp=0.5)
    assert only_element.max_hp() == pytest.approx(1.2)
    assert only_element.hp() == pytest.approx(0.6)


def test_view_damage_uses_hp_multiplier():
    """Damage scales with the element hp multiplier, as the live balance does."""
    view = UnitView(unit_class=Class.RANGED, element=Element.RED)
    assert view.damage() == pytest.approx(1.45 * 5.0 / 6.0)
    assert view.damage() != pytest.approx(1.45 * Element.RED.damage_mult())


def test_unit_damage_and_heal_stay_in_bounds():
    unit = Unit(unit_class=Class.MELEE, element=Element.BLUE, hp=0.7, max_hp=0.7)
    unit.take_damage(0.5)
    assert unit.hp == pytest.approx(0.2)
    unit.heal()
    assert unit.hp == pytest.approx(0.2 + 0.2 * 0.7)
    unit.heal(fraction=10.0)
    assert unit.hp == unit.max_hp
    unit.take_damage(5.0)
    assert unit.hp == 0.0
    assert not unit.alive


def test_dead_units_are_not_healed():
    unit = Unit(unit_class=Class.RANGED, element=Element.RED, hp=0.0, max_hp=5.0 / 6.0)
    unit.heal()
    assert unit.hp == 0.0


def test_unit_view_of_owned_unit():
    unit = Unit(unit_class=Class.RANGED, element=Element.GREEN, hp=0.6, max_hp=1.2)
    view = unit.view()
    assert view.unit_class == Class.RANGED
    assert view.element == Element.GREEN
    assert view.frac_hp == pytest.approx(0.5)
    assert view.hp() == pytest.approx(unit.hp)
    assert view.max_hp() == pytest.approx(unit.max_hp)


def test_negative_inputs_keep_hp_in_bounds():
    """Negative damage cannot overheal and negative healing cannot go below zero."""
    unit = Unit(unit_class=Class.MELEE, element=Element.BLUE, hp=0.7, max_hp=0.7)
    unit.take_damage(-1.0)
    assert unit.hp == 0.7

    unit = Unit(unit_class=Class.MELEE, element=Element.BLUE, hp=0.1, max_hp=0.7)
    unit.heal(fraction=-1.0)
    assert unit.hp == 0.0
