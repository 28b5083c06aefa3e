"""
Data model: tracked hashes and stored transaction records.

A raw transaction is a fixed-length tryte string. Only the fields the
cache needs are parsed; hashes are never computed locally, they are the
identifiers the remote node was asked for.
"""

from dataclasses import dataclass, field

from .errors import CorruptDataError

TRYTE_ALPHABET = "9ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_TRYTE_SET = frozenset(TRYTE_ALPHABET)

HASH_LENGTH = 81
TRANSACTION_LENGTH = 2673

# (start, end) offsets of the fields inside a raw transaction.
ADDRESS = (2187, 2268)
VALUE = (2268, 2295)
TIMESTAMP = (2322, 2331)
CURRENT_INDEX = (2331, 2340)
LAST_INDEX = (2340, 2349)
BUNDLE = (2349, 2430)
TRUNK = (2430, 2511)
BRANCH = (2511, 2592)
TAG = (2592, 2619)


def is_trytes(value, length=None) -> bool:
    if not isinstance(value, str):
        return False
    if length is not None and len(value) != length:
        return False
    return all(c in _TRYTE_SET for c in value)


def is_hash(value) -> bool:
    """True if value is an 81-tryte identifier (hash or bundle id)."""
    return is_trytes(value, HASH_LENGTH)


def trytes_to_int(trytes: str) -> int:
    """Decode little-endian balanced-ternary trytes into an int."""
    result = 0
    for c in reversed(trytes):
        digit = TRYTE_ALPHABET.index(c)
        if digit > 13:
            digit -= 27
        result = result * 27 + digit
    return result


@dataclass
class TrackedHash:
    """A transaction hash the cache monitors, with its confirmation flag."""

    hash: str
    confirmed: bool = False


@dataclass(frozen=True)
class TransactionRecord:
    hash: str
    bundle_id: str
    payload: str = field(repr=False)

    @classmethod
    def from_trytes(cls, hash_: str, payload) -> "TransactionRecord":
        """
        Build a record from a raw transaction, validating both the hash
        and the payload. Raises CorruptDataError on malformed input.
        """
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = payload.decode("ascii")
            except UnicodeDecodeError as e:
                raise CorruptDataError(f"transaction {hash_} is not ascii: {e}") from e
        if not is_hash(hash_):
            raise CorruptDataError(f"invalid transaction hash {hash_!r}")
        if not is_trytes(payload, TRANSACTION_LENGTH):
            raise CorruptDataError(
                f"transaction {hash_} is not {TRANSACTION_LENGTH} trytes"
            )
        return cls(hash=hash_, bundle_id=payload[BUNDLE[0]:BUNDLE[1]], payload=payload)

    def _field(self, span) -> str:
        return self.payload[span[0]:span[1]]

    @property
    def address(self) -> str:
        return self._field(ADDRESS)

    @property
    def value(self) -> int:
        return trytes_to_int(self._field(VALUE))

    @property
    def timestamp(self) -> int:
        return trytes_to_int(self._field(TIMESTAMP))

    @property
    def current_index(self) -> int:
        return trytes_to_int(self._field(CURRENT_INDEX))

    @property
    def last_index(self) -> int:
        return trytes_to_int(self._field(LAST_INDEX))

    @property
    def trunk(self) -> str:
        return self._field(TRUNK)

    @property
    def branch(self) -> str:
        return self._field(BRANCH)

    @property
    def tag(self) -> str:
        return self._field(TAG)

    def to_bytes(self) -> bytes:
        return self.payload.encode("ascii")
