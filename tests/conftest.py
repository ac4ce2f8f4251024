"""Shared pytest fixtures for snbtkit tests."""

import pytest


@pytest.fixture
def level_snbt() -> str:
    """Return a compound exercising every tag kind."""
    return """
    {
        byte1 : 0b,
        byte2 : -10b,
        byte3 : 127b,
        short : 69s,
        int : 420,
        long : 69420,
        float : 3f,
        float2 : 3.14f,
        double : 4d,
        double2 : 4.5d,
        double3 : 5.1,
        bytearray : [B; true, false, 5b],
        intarray : [I; 3, 5, 1],
        longarray : [L; 3l, 4l, 5l],
        list : [4b, 3b, 2b],
        compound : {
            "test" : "The quick brown fox jumps over the lazy dog."
        }
    }
    """


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's SNBTKIT_MAX_DEPTH from leaking into tests."""
    monkeypatch.delenv("SNBTKIT_MAX_DEPTH", raising=False)
