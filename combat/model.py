from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol

RANGED_MELEE_MULT = 0.25  # ranged output multiplier while a melee unit is attacking it
END_FIGHT_HEAL_AMOUNT = 0.2  # fraction of max hp restored to survivors after a fight

class RandomSource(Protocol):
    def pick(self, n: int) -> int: ...

class Class(Enum):
    """Combat role of a unit"""
    MELEE = "melee"
    RANGED = "ranged"

    @classmethod
    def new(cls, rng: RandomSource) -> "Class":
        """Pick a class uniformly at random."""
        variants = list(cls)
        return variants[rng.pick(len(variants))]

    def base_hp(self) -> float:
        return CLASS_STATS[self].base_hp

    def base_damage(self) -> float:
        return CLASS_STATS[self].base_damage

    def base_block(self) -> float:
        return CLASS_STATS[self].base_block

    def base_regen(self) -> float:
        return CLASS_STATS[self].base_regen

@dataclass(frozen=True)
class ClassStats:
    """Balancing numbers fixed by a unit's class"""
    base_hp: float
    base_damage: float
    base_block: float
    base_regen: float

CLASS_STATS: Dict[Class, ClassStats] = {
    Class.MELEE: ClassStats(
        base_hp=0.7,
        base_damage=1.0,
        base_block=0.05,
        base_regen=0.3,
    ),
    Class.RANGED: ClassStats(
        base_hp=1.0,
        base_damage=1.45,  # glass cannon
        base_block=0.0,
        base_regen=0.2,
    ),
}

class Element(Enum):
    """Elemental type. RED beats GREEN, GREEN beats BLUE, BLUE beats RED."""
    RED = "red"
    GREEN = "green"
    BLUE = "blue"

    @classmethod
    def new(cls, rng: RandomSource) -> "Element":
        """Pick an element uniformly at random."""
        variants = list(cls)
        return variants[rng.pick(len(variants))]

    def hp_mult(self) -> float:
        return _HP_MULT[self]

    def damage_mult(self) -> float:
        return _DAMAGE_MULT[self]

    def damage_vs(self, other: "Element") -> float:
        """Damage multiplier when an attacker of this element hits `other`."""
        if _BEATS[self] == other:
            return 3.0 / 2.0
        if _BEATS[other] == self:
            return 2.0 / 3.0
        return 1.0

_HP_MULT = {
    Element.RED: 5.0 / 6.0,
    Element.GREEN: 6.0 / 5.0,
    Element.BLUE: 1.0,
}

_DAMAGE_MULT = {
    Element.RED: 6.0 / 5.0,
    Element.GREEN: 5.0 / 6.0,
    Element.BLUE: 1.0,
}

_BEATS = {
    Element.RED: Element.GREEN,
    Element.GREEN: Element.BLUE,
    Element.BLUE: Element.RED,
}

@dataclass(frozen=True)
class UnitView:
    """What one player knows about an opponent's unit. Any field may be unknown."""
    unit_class: Optional[Class] = None
    element: Optional[Element] = None
    frac_hp: Optional[float] = None

    @classmethod
    def new(cls) -> "UnitView":
        return cls()

    def max_hp(self) -> float:
        class_hp = self.unit_class.base_hp() if self.unit_class is not None else 1.0
        elem_mult = self.element.hp_mult() if self.element is not None else 1.0
        return class_hp * elem_mult

    def hp(self) -> float:
        frac = self.frac_hp if self.frac_hp is not None else 1.0
        return self.max_hp() * frac

    def damage(self) -> float:
        # hp_mult, not damage_mult
        class_dmg = self.unit_class.base_damage() if self.unit_class is not None else 1.0
        elem_mult = self.element.hp_mult() if self.element is not None else 1.0
        return class_dmg * elem_mult

@dataclass
class Unit:
    unit_class: Class
    element: Element
    hp: float
    max_hp: float

    @classmethod
    def new(cls, rng: RandomSource) -> "Unit":
        """Roll a fresh unit at full health."""
        unit_class = Class.new(rng)
        element = Element.new(rng)
        max_hp = unit_class.base_hp() * element.hp_mult()
        return cls(unit_class=unit_class, element=element, hp=max_hp, max_hp=max_hp)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def _set_hp(self, hp: float) -> None:
        self.hp = min(self.max_hp, max(0.0, hp))

    def take_damage(self, amount: float) -> None:
        """Apply damage. hp stays within [0, max_hp]."""
        self._set_hp(self.hp - amount)

    def heal(self, fraction: float = END_FIGHT_HEAL_AMOUNT) -> None:
        """Restore a fraction of max hp. Dead units stay dead."""
        if not self.alive:
            return
        self._set_hp(self.hp + fraction * self.max_hp)

    def view(self) -> UnitView:
        """Full-knowledge view of this unit, as shown to its owner."""
        frac = self.hp / self.max_hp if self.max_hp > 0 else 0.0
        return UnitView(unit_class=self.unit_class, element=self.element, frac_hp=frac)
