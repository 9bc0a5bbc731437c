import io
import logging
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from fastapi import FastAPI, HTTPException

from combat.model import UnitView
from protocol.errors import MalformedMessage, SmallStringError, StringTooLong
from protocol.packets import ClientPacket, ServerPacket
from protocol.reader import try_receive
from protocol.small_string import decode_small_string, encode_small_string
from .schemas import DecodeRequest, DecodeResponse, Direction, HexIn, SmallStringIn, UnitViewIn, UnitViewStats

logger = logging.getLogger(__name__)

app = FastAPI(title="Skirmish Packet Inspector")

PACKET_TYPES = {
    Direction.SERVER: ServerPacket,
    Direction.CLIENT: ClientPacket,
}

def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bytes):
        return value.hex()
    if is_dataclass(value):
        return {f.name: _jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value

def packet_to_dict(packet) -> dict:
    """JSON form of a decoded packet, tagged with its variant name."""
    data = _jsonable(packet)
    data["kind"] = type(packet).__name__
    return data

def _parse_hex(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise HTTPException(400, "payload is not valid hex")

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Skirmish Packet Inspector",
        "docs": "/docs",
        "version": "1.0"
    }

@app.post("/decode/{direction}", response_model=DecodeResponse)
async def decode_packet(direction: Direction, req: DecodeRequest):
    """Decode one captured packet sent by `direction`."""
    stream = io.BytesIO(_parse_hex(req.hex))
    try:
        packet = try_receive(PACKET_TYPES[direction], stream, req.size_limit)
    except MalformedMessage as e:
        raise HTTPException(422, {"error": str(e), "raw": e.raw.hex()})
    if packet is None:
        raise HTTPException(422, {"error": "incomplete", "raw": ""})
    logger.info("[api] decoded %s packet %s", direction.value, type(packet).__name__)
    return DecodeResponse(packet=packet_to_dict(packet), consumed=stream.tell())

@app.post("/small-string/encode")
async def small_string_encode(req: SmallStringIn):
    try:
        block = encode_small_string(req.text)
    except StringTooLong as e:
        raise HTTPException(422, str(e))
    return {"hex": block.hex()}

@app.post("/small-string/decode")
async def small_string_decode(req: HexIn):
    try:
        text = decode_small_string(_parse_hex(req.hex))
    except SmallStringError as e:
        raise HTTPException(422, str(e))
    return {"text": text}

@app.post("/units/view", response_model=UnitViewStats)
async def unit_view_stats(req: UnitViewIn):
    """Derived stats for a partially known unit."""
    view = UnitView(unit_class=req.unit_class, element=req.element, frac_hp=req.frac_hp)
    return UnitViewStats(max_hp=view.max_hp(), hp=view.hp(), damage=view.damage())
