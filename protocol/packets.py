"""Messages exchanged between client and server.

Each message is a u32 variant tag followed by the variant's fields. Decode
through the union base (`ServerPacket.decode`, `ClientPacket.decode`) to get
whichever variant is on the wire. Decoding through a variant class (e.g.
`ClientMove.decode`) raises InvalidTag if another variant arrives.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Type

from combat.model import Unit, UnitView
from .codec import Decoder, Encoder, WireRecord
from .errors import InvalidTag
from .constants import (
    CLIENT_DISCONNECT, CLIENT_FIGHT, CLIENT_MOVE, CLIENT_REARRANGE,
    SERVER_FIGHT, SERVER_MESSAGE, SERVER_MOVE_OPTIONS, SERVER_OPPONENT, SERVER_TEAM,
)
from .records import FightRecording, MoveOption, decode_unit, decode_unit_view, encode_unit, encode_unit_view

class _TaggedUnion(WireRecord):
    TAG: ClassVar[int]
    VARIANTS: ClassVar[Dict[int, Type["_TaggedUnion"]]]

    def encode(self, enc: Encoder) -> None:
        enc.write_u32(self.TAG)
        self.encode_fields(enc)

    @classmethod
    def decode(cls, dec: Decoder):
        tag = dec.read_tag(len(cls.VARIANTS), cls.union_name())
        variant = cls.VARIANTS[tag]
        # decoding through a concrete variant only accepts that variant
        if not issubclass(variant, cls):
            raise InvalidTag(f"expected {cls.__name__}, got {cls.union_name()} tag {tag} ({variant.__name__})")
        return variant.decode_fields(dec)

    @classmethod
    def union_name(cls) -> str:
        raise NotImplementedError

    def encode_fields(self, enc: Encoder) -> None:
        pass

    @classmethod
    def decode_fields(cls, dec: Decoder):
        return cls()

# --- server -> client ---

class ServerPacket(_TaggedUnion):
    """Packet sent by the server."""

    @classmethod
    def union_name(cls) -> str:
        return "ServerPacket"

@dataclass(frozen=True)
class ServerTeam(ServerPacket):
    """The receiving player's own roster."""
    TAG: ClassVar[int] = SERVER_TEAM
    units: List[Unit] = field(default_factory=list)

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_seq(self.units, encode_unit)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ServerTeam":
        return cls(units=dec.read_seq(decode_unit))

@dataclass(frozen=True)
class ServerOpponent(ServerPacket):
    """The opponent's roster as far as the receiving player can see it."""
    TAG: ClassVar[int] = SERVER_OPPONENT
    flag: bool = False
    units: List[UnitView] = field(default_factory=list)

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_bool(self.flag)
        enc.write_seq(self.units, encode_unit_view)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ServerOpponent":
        flag = dec.read_bool()
        return cls(flag=flag, units=dec.read_seq(decode_unit_view))

@dataclass(frozen=True)
class ServerMoveOptions(ServerPacket):
    TAG: ClassVar[int] = SERVER_MOVE_OPTIONS
    options: List[MoveOption] = field(default_factory=list)

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_seq(self.options, lambda e, opt: opt.encode(e))

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ServerMoveOptions":
        return cls(options=dec.read_seq(MoveOption.decode))

@dataclass(frozen=True)
class ServerMessage(ServerPacket):
    TAG: ClassVar[int] = SERVER_MESSAGE
    text: str = ""

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_string(self.text)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ServerMessage":
        return cls(text=dec.read_string())

@dataclass(frozen=True)
class ServerFight(ServerPacket):
    TAG: ClassVar[int] = SERVER_FIGHT
    recording: FightRecording = FightRecording(won=False)

    def encode_fields(self, enc: Encoder) -> None:
        self.recording.encode(enc)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ServerFight":
        return cls(recording=FightRecording.decode(dec))

ServerPacket.VARIANTS = {
    SERVER_TEAM: ServerTeam,
    SERVER_OPPONENT: ServerOpponent,
    SERVER_MOVE_OPTIONS: ServerMoveOptions,
    SERVER_MESSAGE: ServerMessage,
    SERVER_FIGHT: ServerFight,
}

# --- client -> server ---

class ClientPacket(_TaggedUnion):
    """Packet sent by a client."""

    @classmethod
    def union_name(cls) -> str:
        return "ClientPacket"

@dataclass(frozen=True)
class ClientMove(ClientPacket):
    TAG: ClassVar[int] = CLIENT_MOVE
    option_id: int = 0  # MoveOption.id picked by the player

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_u64(self.option_id)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ClientMove":
        return cls(option_id=dec.read_u64())

@dataclass(frozen=True)
class ClientFight(ClientPacket):
    TAG: ClassVar[int] = CLIENT_FIGHT
    accept: bool = False

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_bool(self.accept)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ClientFight":
        return cls(accept=dec.read_bool())

@dataclass(frozen=True)
class ClientRearrange(ClientPacket):
    """Swap two roster slots."""
    TAG: ClassVar[int] = CLIENT_REARRANGE
    from_index: int = 0
    to_index: int = 0

    def encode_fields(self, enc: Encoder) -> None:
        enc.write_u64(self.from_index)
        enc.write_u64(self.to_index)

    @classmethod
    def decode_fields(cls, dec: Decoder) -> "ClientRearrange":
        from_index = dec.read_u64()
        return cls(from_index=from_index, to_index=dec.read_u64())

@dataclass(frozen=True)
class ClientDisconnect(ClientPacket):
    TAG: ClassVar[int] = CLIENT_DISCONNECT

ClientPacket.VARIANTS = {
    CLIENT_MOVE: ClientMove,
    CLIENT_FIGHT: ClientFight,
    CLIENT_REARRANGE: ClientRearrange,
    CLIENT_DISCONNECT: ClientDisconnect,
}
