from dataclasses import dataclass
from typing import Tuple

from combat.model import Class, Element, Unit, UnitView
from .codec import Decoder, Encoder, WireRecord
from .constants import AUTH_DATA_WORDS, AUTH_ID_SIZE

# Wire tags follow declaration order and must never be reordered
CLASS_BY_TAG: Tuple[Class, ...] = (Class.MELEE, Class.RANGED)
ELEMENT_BY_TAG: Tuple[Element, ...] = (Element.RED, Element.GREEN, Element.BLUE)

def encode_class(enc: Encoder, value: Class) -> None:
    enc.write_u32(CLASS_BY_TAG.index(value))

def decode_class(dec: Decoder) -> Class:
    return CLASS_BY_TAG[dec.read_tag(len(CLASS_BY_TAG), "Class")]

def encode_element(enc: Encoder, value: Element) -> None:
    enc.write_u32(ELEMENT_BY_TAG.index(value))

def decode_element(dec: Decoder) -> Element:
    return ELEMENT_BY_TAG[dec.read_tag(len(ELEMENT_BY_TAG), "Element")]

def encode_unit(enc: Encoder, unit: Unit) -> None:
    encode_class(enc, unit.unit_class)
    encode_element(enc, unit.element)
    enc.write_f64(unit.hp)
    enc.write_f64(unit.max_hp)

def decode_unit(dec: Decoder) -> Unit:
    """Read a Unit as sent. hp is not checked against [0, max_hp]."""
    unit_class = decode_class(dec)
    element = decode_element(dec)
    hp = dec.read_f64()
    max_hp = dec.read_f64()
    return Unit(unit_class=unit_class, element=element, hp=hp, max_hp=max_hp)

def encode_unit_view(enc: Encoder, view: UnitView) -> None:
    enc.write_option(view.unit_class, encode_class)
    enc.write_option(view.element, encode_element)
    enc.write_option(view.frac_hp, Encoder.write_f64)

def decode_unit_view(dec: Decoder) -> UnitView:
    unit_class = dec.read_option(decode_class)
    element = dec.read_option(decode_element)
    frac_hp = dec.read_option(Decoder.read_f64)
    return UnitView(unit_class=unit_class, element=element, frac_hp=frac_hp)

@dataclass(frozen=True)
class MoveOption(WireRecord):
    """A move the player may pick. The id is chosen by the game logic."""
    id: int

    def encode(self, enc: Encoder) -> None:
        enc.write_u64(self.id)

    @classmethod
    def decode(cls, dec: Decoder) -> "MoveOption":
        return cls(id=dec.read_u64())

@dataclass(frozen=True)
class FightRecording(WireRecord):
    won: bool

    def encode(self, enc: Encoder) -> None:
        enc.write_bool(self.won)

    @classmethod
    def decode(cls, dec: Decoder) -> "FightRecording":
        return cls(won=dec.read_bool())

@dataclass(frozen=True)
class AuthInfo(WireRecord):
    """Opaque session credential. Carried whole, never inspected."""
    id: bytes
    data: Tuple[int, ...]

    def __post_init__(self):
        if len(self.id) != AUTH_ID_SIZE:
            raise ValueError(f"AuthInfo.id must be {AUTH_ID_SIZE} bytes, got {len(self.id)}")
        if len(self.data) != AUTH_DATA_WORDS:
            raise ValueError(f"AuthInfo.data must hold {AUTH_DATA_WORDS} words, got {len(self.data)}")
        object.__setattr__(self, "id", bytes(self.id))
        object.__setattr__(self, "data", tuple(self.data))

    def encode(self, enc: Encoder) -> None:
        enc.write_raw(self.id)
        for word in self.data:
            enc.write_u64(word)

    @classmethod
    def decode(cls, dec: Decoder) -> "AuthInfo":
        auth_id = dec.read_raw(AUTH_ID_SIZE)
        data = tuple(dec.read_u64() for _ in range(AUTH_DATA_WORDS))
        return cls(id=auth_id, data=data)
