import pytest

from ledgercache.errors import CorruptDataError
from ledgercache.transaction import TransactionRecord, is_hash, trytes_to_int
from txutil import make_hash, make_payload


def test_from_trytes_extracts_bundle():
    bundle = make_hash("B")
    record = TransactionRecord.from_trytes(make_hash("A"), make_payload(bundle))
    assert record.hash == make_hash("A")
    assert record.bundle_id == bundle
    assert record.current_index == 0


def test_from_trytes_accepts_bytes():
    payload = make_payload(make_hash("B"))
    record = TransactionRecord.from_trytes(make_hash("A"), payload.encode("ascii"))
    assert record.payload == payload


def test_parsed_fields():
    payload = make_payload(make_hash("B"), index_tryte="C")
    payload = (
        payload[:2268] + "E" + "9" * 26          # value
        + payload[2295:2322] + "9A" + "9" * 7    # timestamp
        + payload[2331:2430]
        + "T" * 81 + "R" * 81 + "G" * 27         # trunk, branch, tag
        + payload[2619:]
    )
    record = TransactionRecord.from_trytes(make_hash("A"), payload)
    assert record.bundle_id == make_hash("B")
    assert record.address == "9" * 81
    assert record.value == 5
    assert record.timestamp == 27
    assert record.current_index == 3
    assert record.last_index == 0
    assert record.trunk == "T" * 81
    assert record.branch == "R" * 81
    assert record.tag == "G" * 27


def test_trytes_to_int_balanced_ternary():
    assert trytes_to_int("9") == 0
    assert trytes_to_int("A") == 1
    assert trytes_to_int("M") == 13
    assert trytes_to_int("N") == -13
    assert trytes_to_int("Z") == -1
    assert trytes_to_int("9A") == 27
    assert trytes_to_int("ZA") == 26


@pytest.mark.parametrize(
    "hash_,payload",
    [
        ("A" * 80, make_payload("B" * 81)),
        ("a" * 81, make_payload("B" * 81)),
        ("A" * 81, "9" * 100),
        ("A" * 81, make_payload("B" * 81)[:-1] + "!"),
    ],
)
def test_from_trytes_rejects_malformed(hash_, payload):
    with pytest.raises(CorruptDataError):
        TransactionRecord.from_trytes(hash_, payload)


def test_is_hash():
    assert is_hash("9" * 81)
    assert not is_hash("9" * 82)
    assert not is_hash(None)
