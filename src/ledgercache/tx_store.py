"""
Per-hash store of compressed transaction bodies.

Keys are the ASCII bytes of the transaction hash, values the deflated raw
transaction. Bodies are decompressed lazily on read.
"""

from typing import Iterable, Iterator, List, Tuple

from .codec import decode_body, encode_body
from .errors import NotFoundError
from .storage_api import TransactionAPI
from .transaction import TransactionRecord

TX_BUCKET = b"transactions"


def _key(hash_: str) -> bytes:
    return hash_.encode("ascii")


class TransactionStore:
    def __init__(self, tx: TransactionAPI):
        self.tx = tx

    def _decode(self, hash_: str, value: bytes) -> TransactionRecord:
        return TransactionRecord.from_trytes(hash_, decode_body(value))

    def get(self, hash_: str) -> TransactionRecord:
        """
        Return the stored transaction. Raises NotFoundError if absent and
        CorruptDataError if the stored body cannot be decoded.
        """
        value = self.tx.get(TX_BUCKET, _key(hash_))
        if value is None:
            raise NotFoundError(hash_)
        return self._decode(hash_, value)

    def get_many(self, hashes: Iterable[str]) -> List[TransactionRecord]:
        """All-or-nothing lookup in request order."""
        return [self.get(h) for h in hashes]

    def contains(self, hash_: str) -> bool:
        return self.tx.get(TX_BUCKET, _key(hash_)) is not None

    def put(self, record: TransactionRecord) -> None:
        """Compress and store record; an existing body for the hash is replaced."""
        self.tx.put(TX_BUCKET, _key(record.hash), encode_body(record.to_bytes()))

    def scan_all(self) -> Iterator[Tuple[str, TransactionRecord]]:
        """
        Yield (hash, record) for every stored body in ascending hash byte
        order. The generator is single-use and only valid while the
        enclosing transaction is open.
        """
        for key, value in self.tx.cursor(TX_BUCKET):
            hash_ = key.decode("ascii")
            yield hash_, self._decode(hash_, value)

    def hashes(self) -> Iterator[str]:
        for key in self.tx.keys(TX_BUCKET):
            yield key.decode("ascii")
