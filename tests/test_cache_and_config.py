import json

from ledgercache import cli
from ledgercache.cache import create_cache
from ledgercache.config import load_config
from ledgercache.transaction import TrackedHash
from txutil import DummyAPI, make_hash, make_payload

H1 = make_hash("A")
H2 = make_hash("C")
BUNDLE = make_hash("B")


def test_load_config_defaults_and_file(tmp_path):
    default = load_config(None)
    assert default.node.url == "http://localhost:14266"
    assert default.storage.db_path == "ledgercache.db"

    path = tmp_path / "cfg.yml"
    path.write_text(
        "node:\n  url: http://example:1234\n  timeout_sec: 5\n"
        "storage:\n  db_path: /tmp/x.db\n"
    )
    cfg = load_config(str(path))
    assert cfg.node.url == "http://example:1234"
    assert cfg.node.timeout_sec == 5
    assert cfg.storage.db_path == "/tmp/x.db"


def test_load_config_partial_file(tmp_path):
    path = tmp_path / "cfg.yml"
    path.write_text("storage:\n  db_path: only.db\n")
    cfg = load_config(str(path))
    assert cfg.storage.db_path == "only.db"
    assert cfg.node.url == "http://localhost:14266"


def test_cache_end_to_end(tmp_path):
    api = DummyAPI({H1: make_payload(BUNDLE), H2: make_payload(BUNDLE)})
    cache = create_cache(db_path=str(tmp_path / "cache.db"), api=api)

    assert cache.track([H1, H2]) == [H1, H2]
    assert cache.confirm([H2]) == 1
    assert cache.tracked() == [TrackedHash(H1, False), TrackedHash(H2, True)]
    assert cache.status()["missing"] == 2

    assert cache.update_transactions() == [H1, H2]
    assert cache.get_transaction(H1).bundle_id == BUNDLE

    records, states = cache.find_transactions_by_bundle(BUNDLE)
    assert [r.hash for r in records] == [H1, H2]
    assert [s.confirmed for s in states] == [False, True]

    status = cache.status()
    assert status["tracked"] == 2
    assert status["confirmed"] == 1
    assert status["stored"] == 2
    assert status["missing"] == 0
    cache.close()


def test_cli_track_and_status(tmp_path, capsys):
    db = str(tmp_path / "cli.db")

    assert cli.main(["--db", db, "track", H1, H2]) == 0
    assert "Tracking 2 new hash(es)" in capsys.readouterr().out

    assert cli.main(["--db", db, "status", "--json"]) == 0
    status = json.loads(capsys.readouterr().out)
    assert status["tracked"] == 2
    assert status["missing"] == 2


def test_cli_rejects_bad_hash(tmp_path, capsys):
    assert cli.main(["--db", str(tmp_path / "cli.db"), "track", "nope"]) == 1
    assert "not an 81-tryte hash" in capsys.readouterr().out


def test_cli_update_reports_remote_error(tmp_path, capsys):
    db = str(tmp_path / "cli.db")
    assert cli.main(["--db", db, "track", H1]) == 0
    capsys.readouterr()

    # Nothing listens on port 9, so the fetch fails.
    assert cli.main(["--db", db, "--node", "http://127.0.0.1:9", "update"]) == 1
    assert "Error: getTrytes failed" in capsys.readouterr().out


def test_cli_bundle_empty(tmp_path, capsys):
    assert cli.main(["--db", str(tmp_path / "cli.db"), "bundle", BUNDLE, "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == []
