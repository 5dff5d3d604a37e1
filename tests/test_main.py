import json
import signal

import pytest

import main
from septa_crawler.dedup import title_hash
from septa_crawler.errors import AuthenticationError, MissingCredentialsError
from septa_crawler.model import ExtractedBid


def make_bid(title):
    return ExtractedBid(portal="SEPTA", title=title, title_hash=title_hash(title))


class StubCrawler:
    instances = []
    outcome = []
    connection_ok = True

    def __init__(self, credentials=None, debug=False, require_login=True):
        self.credentials = credentials
        self.debug = debug
        self.require_login = require_login
        StubCrawler.instances.append(self)

    def run(self):
        if isinstance(StubCrawler.outcome, Exception):
            raise StubCrawler.outcome
        return StubCrawler.outcome

    def test_connection(self):
        return StubCrawler.connection_ok


@pytest.fixture
def stub(monkeypatch):
    StubCrawler.instances = []
    StubCrawler.outcome = []
    StubCrawler.connection_ok = True
    monkeypatch.setattr(main, "SeptaCrawler", StubCrawler)
    handlers = {}
    monkeypatch.setattr(main.signal, "signal", lambda signum, handler: handlers.__setitem__(signum, handler))
    StubCrawler.handlers = handlers
    return StubCrawler


def test_run_upserts_and_exports(stub, tmp_path):
    stub.outcome = [make_bid("Bid 1 Rail Grinding Services"), make_bid("RFQ 2 Bus Wash Supplies")]

    assert main.main(["--output-dir", str(tmp_path), "--no-login"]) == 0

    assert stub.instances[0].require_login is False
    with open(tmp_path / "bids.json", encoding="utf-8") as f:
        assert len(json.load(f)["bids"]) == 2
    for name in ("results.json", "results.csv"):
        assert (tmp_path / name).exists()
    assert stub.handlers[signal.SIGTERM] is main._terminate


@pytest.mark.parametrize("error", [
    MissingCredentialsError("SEPTA credentials are required"),
    AuthenticationError("Login failed: Invalid password"),
])
def test_fatal_failures_exit_with_one(stub, tmp_path, error):
    stub.outcome = error
    assert main.main(["--output-dir", str(tmp_path)]) == 1
    assert not (tmp_path / "bids.json").exists()


def test_connection_check_exit_codes(stub):
    assert main.main(["--test-connection"]) == 0
    stub.connection_ok = False
    assert main.main(["--test-connection"]) == 1


def test_credentials_come_from_environment(stub, tmp_path, monkeypatch):
    monkeypatch.setenv("SEPTA_USERNAME", "buyer")
    monkeypatch.setenv("SEPTA_PASSWORD", "secret")
    main.main(["--output-dir", str(tmp_path)])
    assert stub.instances[0].credentials.username == "buyer"


def test_sigterm_unwinds_with_system_exit():
    with pytest.raises(SystemExit) as excinfo:
        main._terminate(signal.SIGTERM, None)
    assert excinfo.value.code == 128 + signal.SIGTERM
