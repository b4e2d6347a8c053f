"""Tests for the message transcript."""

from pathlib import Path

import pytest

from posenvelope import codec
from posenvelope.common.utils import sha256_hex
from posenvelope.message import Message, Stamp
from posenvelope.storage import transcript


class TestTranscript:
    def test_logs_outbound_and_inbound(self, tmp_path: Path, stamp: Stamp, clock) -> None:
        path = tmp_path / "logs" / "session.log"
        out = Message(id="ping1", event="ping", data={}, needs_encryption=True)
        wire = codec.encode(out, stamp, clock=clock)
        inbound = codec.decode(wire, stamp.secrets)

        f = transcript.open_transcript(str(path))
        transcript.log_message(f, "out", out)
        transcript.log_message(f, "in", inbound)
        f.close()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "out|2023-11-14T22:13:20.000|ping|ping1|pos1|-"
        assert lines[1] == f"in|2023-11-14T22:13:20.000|ping|ping1|pos1|{inbound.incoming_hmac}"

    def test_appends(self, tmp_path: Path) -> None:
        path = tmp_path / "t.log"
        m = Message(id="1", event="pong")
        for _ in range(2):
            with transcript.open_transcript(str(path)) as f:
                transcript.log_message(f, "in", m)
        assert len(path.read_text(encoding="utf-8").splitlines()) == 2

    def test_rejects_bad_direction(self, tmp_path: Path) -> None:
        with transcript.open_transcript(str(tmp_path / "t.log")) as f:
            with pytest.raises(ValueError):
                transcript.log_message(f, "sideways", Message(id="1", event="pong"))

    def test_hash_matches_file_contents(self, tmp_path: Path) -> None:
        path = tmp_path / "t.log"
        with transcript.open_transcript(str(path)) as f:
            transcript.log_message(f, "out", Message(id="1", event="ping"))
        assert transcript.compute_transcript_hash(str(path)) == sha256_hex(path.read_bytes())
