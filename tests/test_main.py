import asyncio
import io
import json
import os

import pytest
from pydantic import ValidationError

import gnode.main
from gnode.gateway import StdioGateway
from gnode.nucleus.errors import FatalNodeError, MalformedMessageError, TransportError
from gnode.settings import Settings


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("NODE_VARIANT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.NODE_VARIANT == "broadcast"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.MAX_LINE_BYTES == 1024 * 1024


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("NODE_VARIANT", "unique-ids")
    monkeypatch.setenv("MAX_LINE_BYTES", "4096")
    settings = Settings(_env_file=None)
    assert settings.NODE_VARIANT == "unique-ids"
    assert settings.MAX_LINE_BYTES == 4096


def test_settings_reject_unknown_variant(monkeypatch):
    monkeypatch.setenv("NODE_VARIANT", "kafka")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_main_exits_non_zero_on_fatal_error(monkeypatch):
    seen = []

    async def failing_serve(variant_name):
        seen.append(variant_name)
        raise MalformedMessageError("bad line")

    monkeypatch.setattr(gnode.main, "serve", failing_serve)
    assert gnode.main.main("echo") == 1
    assert seen == ["echo"]


def test_main_exits_zero_at_end_of_input(monkeypatch):
    async def quiet_serve(variant_name):
        return None

    monkeypatch.setattr(gnode.main, "serve", quiet_serve)
    assert gnode.main.main("broadcast") == 0


def test_gateway_runs_node_over_a_pipe():
    read_fd, write_fd = os.pipe()
    with os.fdopen(write_fd, "wb") as writer:
        writer.write(b'{"src":"c1","dest":"n1","body":{"type":"init","msg_id":1,"node_id":"n1","node_ids":["n1"]}}\n')
        writer.write(b'{"src":"c1","dest":"n1","body":{"type":"echo","msg_id":2,"echo":"ping"}}\n')

    stdout = io.StringIO()
    with os.fdopen(read_fd, "rb") as stdin:
        gateway = StdioGateway(gnode.main.build_pipeline("echo"), stdin=stdin, stdout=stdout)
        asyncio.run(gateway.start())

    lines = [json.loads(line) for line in stdout.getvalue().splitlines()]
    assert [line["body"]["type"] for line in lines] == ["init_ok", "echo_ok"]
    assert lines[1]["body"]["echo"] == "ping"
    assert gateway.outbox.sent == 2


def test_gateway_reads_regular_file_as_stdin(tmp_path):
    requests = tmp_path / "requests.jsonl"
    requests.write_text(
        '{"src":"c1","dest":"n1","body":{"type":"init","msg_id":1,"node_id":"n1","node_ids":["n1"]}}\n'
        '{"src":"c1","dest":"n1","body":{"type":"broadcast","msg_id":2,"message":1000}}\n'
        '{"src":"c1","dest":"n1","body":{"type":"read","msg_id":3}}\n'
    )

    stdout = io.StringIO()
    with open(requests, "rb") as stdin:
        gateway = StdioGateway(gnode.main.build_pipeline("broadcast"), stdin=stdin, stdout=stdout)
        asyncio.run(gateway.start())

    lines = [json.loads(line) for line in stdout.getvalue().splitlines()]
    assert [line["body"]["type"] for line in lines] == ["init_ok", "broadcast_ok", "read_ok"]
    assert lines[2]["body"]["messages"] == [1000]


def test_gateway_reads_empty_file_as_stdin(tmp_path):
    requests = tmp_path / "empty.jsonl"
    requests.write_bytes(b"")

    stdout = io.StringIO()
    with open(requests, "rb") as stdin:
        gateway = StdioGateway(gnode.main.build_pipeline("echo"), stdin=stdin, stdout=stdout)
        asyncio.run(gateway.start())

    assert stdout.getvalue() == ""


def test_gateway_stdin_that_cannot_be_attached_is_fatal(tmp_path):
    requests = tmp_path / "requests.jsonl"
    requests.write_bytes(b"")
    stdin = open(requests, "rb")
    stdin.close()

    gateway = StdioGateway(gnode.main.build_pipeline("echo"), stdin=stdin, stdout=io.StringIO())
    with pytest.raises(TransportError) as excinfo:
        asyncio.run(gateway.start())
    assert isinstance(excinfo.value, FatalNodeError)
