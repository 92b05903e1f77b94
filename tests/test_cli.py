"""Tests for the headless command line runner."""

import pytest
from chip8vm.__main__ import main


@pytest.fixture
def rom(tmp_path):
    def _write(program):
        path = tmp_path / "test.ch8"
        path.write_bytes(bytes(program))
        return str(path)
    return _write


def test_run_and_show(rom, capsys):
    # V0 = 0, I = font 0, DRW V0, V0, 5; jump to self
    path = rom([0x60, 0x00, 0xA0, 0x00, 0xD0, 0x05, 0x12, 0x06])

    status = main([path, "--ticks", "3", "--show", "--no-progress"])

    assert status == 0
    lines = capsys.readouterr().out.splitlines()[-32:]
    assert lines[0].startswith("####.")
    assert lines[1].startswith("#..#.")


def test_fault_exit_status(rom, capsys):
    path = rom([0x00, 0xEE])

    status = main([path, "--ticks", "2", "--no-progress", "--log-level", "CRITICAL"])

    assert status == 1
    assert "stack underflow" in capsys.readouterr().err


def test_strict_flag(rom, capsys):
    path = rom([0xF0, 0xFF])

    assert main([path, "--ticks", "1", "--no-progress"]) == 0
    assert main([path, "--ticks", "1", "--no-progress", "--strict", "--log-level", "CRITICAL"]) == 1


def test_missing_rom(tmp_path, capsys):
    status = main([str(tmp_path / "missing.ch8"), "--no-progress"])
    assert status == 2


def test_invalid_budget(rom, capsys):
    path = rom([0x12, 0x00])
    assert main([path, "--instructions-per-tick", "0", "--no-progress"]) == 2


def test_stops_when_waiting_for_key(rom, capsys):
    path = rom([0xF1, 0x0A])
    assert main([path, "--ticks", "100", "--no-progress"]) == 0
