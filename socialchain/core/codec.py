"""Binary codec for instructions and stored records.

All integers are little-endian. Strings and sequences carry a u32 length
prefix; addresses are 32 raw bytes.

Stored records are read in two phases. Account buffers are allocated at a
ceiling and may hold stale bytes past the logical end of a record, so the
fixed header is decoded first from a narrow slice, the logical length is
derived from the header count, and only that slice is decoded.
"""

import struct

from socialchain.config import ContentLayout
from socialchain.core.space import (
    ADDRESS_SIZE,
    HEADER_POSTLOG,
    HEADER_PROFILE,
    POST_COUNTER_SIZE,
    STRING_PREFIX_SIZE,
    TIMESTAMP_SIZE,
    ContentPolicy,
    postlog_space,
    profile_space,
)
from socialchain.exceptions import ArgumentError, CapacityExceededError, DecodeError
from socialchain.models.address import Address
from socialchain.models.instruction import (
    INSTRUCTION_TYPES,
    FollowUser,
    InitializeUser,
    InstructionKind,
    PostContent,
    SocialInstruction,
    UnfollowUser,
)
from socialchain.models.post import Post, PostCounter, PostLog
from socialchain.models.profile import Profile

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


class _Reader:
    """Cursor over a byte buffer."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise DecodeError(
                f"Unexpected end of data at offset {self._offset}: "
                f"need {size} bytes, have {self.remaining}"
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return _U16.unpack(self.take(2))[0]

    def u32(self) -> int:
        return _U32.unpack(self.take(4))[0]

    def u64(self) -> int:
        return _U64.unpack(self.take(8))[0]

    def string(self) -> str:
        raw = self.take(self.u32())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 string: {e}") from e

    def address(self) -> Address:
        return Address(self.take(ADDRESS_SIZE))

    def finish(self) -> None:
        if self.remaining:
            raise DecodeError(f"{self.remaining} trailing bytes after record")


class _Writer:
    """Append-only byte builder."""

    def __init__(self):
        self._buf = bytearray()

    def _pack(self, fmt: struct.Struct, value: int, name: str) -> None:
        try:
            self._buf += fmt.pack(value)
        except struct.error as e:
            raise ArgumentError(f"{name} out of range: {value}") from e

    def u8(self, value: int) -> None:
        self._pack(_U8, value, "u8")

    def u16(self, value: int) -> None:
        self._pack(_U16, value, "u16")

    def u32(self, value: int) -> None:
        self._pack(_U32, value, "u32")

    def u64(self, value: int) -> None:
        self._pack(_U64, value, "u64")

    def string(self, value: str) -> None:
        raw = value.encode("utf-8")
        self.u32(len(raw))
        self._buf += raw

    def address(self, value: Address) -> None:
        self._buf += bytes(value)

    def getvalue(self) -> bytes:
        return bytes(self._buf)


# Profile

def encode_profile(profile: Profile) -> bytes:
    """Serialize a profile: u16 follow_count, u32 length, addresses."""
    w = _Writer()
    w.u16(profile.follow_count)
    w.u32(len(profile.follows))
    for address in profile.follows:
        w.address(address)
    return w.getvalue()


def decode_profile(data: bytes | bytearray | memoryview) -> Profile:
    """Deserialize a profile from exactly its encoded bytes."""
    r = _Reader(data)
    follow_count = r.u16()
    length = r.u32()
    if follow_count != length:
        raise DecodeError(
            f"Profile follow_count {follow_count} disagrees with {length} stored follows"
        )
    follows = [r.address() for _ in range(length)]
    r.finish()
    return Profile(follows=follows)


def read_profile(buffer: bytes | bytearray | memoryview) -> Profile:
    """Decode the profile held in a (possibly oversized) account buffer."""
    if len(buffer) < HEADER_PROFILE:
        raise DecodeError(
            f"Profile account holds {len(buffer)} bytes, header needs {HEADER_PROFILE}"
        )
    follow_count = _U16.unpack(bytes(buffer[:2]))[0]
    size = profile_space(follow_count)
    if size > len(buffer):
        raise DecodeError(
            f"Profile header claims {follow_count} follows ({size} bytes) "
            f"but account holds {len(buffer)} bytes"
        )
    return decode_profile(buffer[:size])


# Posts

def _write_post(w: _Writer, post: Post) -> None:
    w.string(post.content)
    w.u64(post.timestamp)


def _read_post(r: _Reader) -> Post:
    content = r.string()
    timestamp = r.u64()
    return Post(content=content, timestamp=timestamp)


def encode_post(post: Post) -> bytes:
    """Serialize a post: length-prefixed content then u64 timestamp."""
    w = _Writer()
    _write_post(w, post)
    return w.getvalue()


def decode_post(data: bytes | bytearray | memoryview) -> Post:
    """Deserialize a post from exactly its encoded bytes."""
    r = _Reader(data)
    post = _read_post(r)
    r.finish()
    return post


def read_post(buffer: bytes | bytearray | memoryview) -> Post:
    """Decode the post at the start of an account buffer, ignoring trailing bytes."""
    return _read_post(_Reader(buffer))


def encode_post_log(log: PostLog) -> bytes:
    """Serialize a post log: u64 post_count, u32 length, posts."""
    w = _Writer()
    w.u64(log.post_count)
    w.u32(len(log.posts))
    for post in log.posts:
        _write_post(w, post)
    return w.getvalue()


def _read_post_log(r: _Reader) -> PostLog:
    post_count = r.u64()
    length = r.u32()
    if post_count != length:
        raise DecodeError(
            f"Post log post_count {post_count} disagrees with {length} stored posts"
        )
    return PostLog(posts=[_read_post(r) for _ in range(length)])


def decode_post_log(data: bytes | bytearray | memoryview) -> PostLog:
    """Deserialize a post log from exactly its encoded bytes."""
    r = _Reader(data)
    log = _read_post_log(r)
    r.finish()
    return log


def read_post_log(buffer: bytes | bytearray | memoryview, policy: ContentPolicy) -> PostLog:
    """
    Decode the post log held in a (possibly oversized) account buffer.

    For fixed-length content the logical size follows from the header count
    alone. Variable-length posts are self-delimiting, so the header count
    bounds how many are read and anything after the last one is ignored.
    """
    if len(buffer) < HEADER_POSTLOG:
        raise DecodeError(
            f"Post log account holds {len(buffer)} bytes, header needs {HEADER_POSTLOG}"
        )
    post_count = _U64.unpack(bytes(buffer[:8]))[0]

    if policy.layout == ContentLayout.FIXED:
        size = postlog_space(post_count, policy)
        if size > len(buffer):
            raise DecodeError(
                f"Post log header claims {post_count} posts ({size} bytes) "
                f"but account holds {len(buffer)} bytes"
            )
        return decode_post_log(buffer[:size])

    min_size = HEADER_POSTLOG + post_count * (STRING_PREFIX_SIZE + TIMESTAMP_SIZE)
    if min_size > len(buffer):
        raise DecodeError(
            f"Post log header claims {post_count} posts but account holds "
            f"{len(buffer)} bytes"
        )
    return _read_post_log(_Reader(buffer))


def encoded_post_log_size(log: PostLog) -> int:
    return len(encode_post_log(log))


def encode_post_counter(counter: PostCounter) -> bytes:
    w = _Writer()
    w.u64(counter.post_count)
    return w.getvalue()


def decode_post_counter(data: bytes | bytearray | memoryview) -> PostCounter:
    """Deserialize a post counter from exactly its encoded bytes."""
    r = _Reader(data)
    counter = PostCounter(post_count=r.u64())
    r.finish()
    return counter


def read_post_counter(buffer: bytes | bytearray | memoryview) -> PostCounter:
    if len(buffer) < POST_COUNTER_SIZE:
        raise DecodeError(
            f"Post counter account holds {len(buffer)} bytes, needs {POST_COUNTER_SIZE}"
        )
    return PostCounter(post_count=_U64.unpack(bytes(buffer[:POST_COUNTER_SIZE]))[0])


# Instructions

def encode_instruction(instruction: SocialInstruction) -> bytes:
    """Serialize an instruction: u8 discriminant then its fields."""
    w = _Writer()
    w.u8(int(instruction.kind))
    if isinstance(instruction, InitializeUser):
        w.string(instruction.seed_type)
    elif isinstance(instruction, FollowUser):
        w.address(instruction.user_to_follow)
    elif isinstance(instruction, UnfollowUser):
        w.address(instruction.user_to_unfollow)
    elif isinstance(instruction, PostContent):
        w.string(instruction.content)
    return w.getvalue()


def decode_instruction(data: bytes | bytearray | memoryview) -> SocialInstruction:
    """
    Deserialize an instruction payload, which must be consumed exactly.

    Raises:
        DecodeError: Unknown discriminant, truncated payload or trailing bytes
    """
    r = _Reader(data)
    tag = r.u8()
    try:
        kind = InstructionKind(tag)
    except ValueError:
        raise DecodeError(f"Unknown instruction discriminant: {tag}") from None

    if kind == InstructionKind.INITIALIZE_USER:
        instruction = InitializeUser(seed_type=r.string())
    elif kind == InstructionKind.FOLLOW_USER:
        instruction = FollowUser(user_to_follow=r.address())
    elif kind == InstructionKind.UNFOLLOW_USER:
        instruction = UnfollowUser(user_to_unfollow=r.address())
    elif kind == InstructionKind.POST_CONTENT:
        instruction = PostContent(content=r.string())
    else:
        instruction = INSTRUCTION_TYPES[kind]()
    r.finish()
    return instruction


def write_record(buffer: bytearray, payload: bytes) -> None:
    """
    Write payload at the start of an account buffer in a single pass.

    Raises:
        CapacityExceededError: If payload is larger than the buffer
    """
    if len(payload) > len(buffer):
        raise CapacityExceededError(
            f"Record needs {len(payload)} bytes but account holds {len(buffer)}"
        )
    buffer[:len(payload)] = payload
