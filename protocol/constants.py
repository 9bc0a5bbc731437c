# protocol/constants.py
# Little-endian fixed-width layout, compatible with bincode 1.x defaults
U8_FMT = '<B'
U32_FMT = '<I'
U64_FMT = '<Q'
F64_FMT = '<d'

LENGTH_PREFIX_SIZE = 8  # u64 before every string and list

# Server -> client packet tags
SERVER_TEAM = 0
SERVER_OPPONENT = 1
SERVER_MOVE_OPTIONS = 2
SERVER_MESSAGE = 3
SERVER_FIGHT = 4

# Client -> server packet tags
CLIENT_MOVE = 0
CLIENT_FIGHT = 1
CLIENT_REARRANGE = 2
CLIENT_DISCONNECT = 3

# Fixed-width string block
SMALL_STRING_SIZE = 32
SMALL_STRING_MAX_ENCODED = SMALL_STRING_SIZE + LENGTH_PREFIX_SIZE  # exclusive

AUTH_ID_SIZE = 32
AUTH_DATA_WORDS = 4

# Default decode limits
DEFAULT_CLIENT_PACKET_LIMIT = 64       # largest client packet is 20 bytes
DEFAULT_SERVER_PACKET_LIMIT = 1 << 16
DEFAULT_READ_CHUNK_SIZE = 4096
STRING_READ_CHUNK = 4096
