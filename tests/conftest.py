import pytest
from pathlib import Path
from clip_ingest.config import IngestConfig, SOURCE_SUBDIR


@pytest.fixture
def card(tmp_path):
    """Returns a mounted-card root with an empty recorder folder."""
    root = tmp_path / "card"
    (root / SOURCE_SUBDIR).mkdir(parents=True)
    return root


@pytest.fixture
def add_raw(card):
    """Writes a fragment into the card's recorder folder."""
    def _add(name: str, data: bytes = b"") -> Path:
        p = card / SOURCE_SUBDIR / name
        p.write_bytes(data)
        return p
    return _add


@pytest.fixture
def make_tool(tmp_path):
    """
    Builds a fake executable that prints fixed output and exits with a
    fixed code. Each call's arguments are appended to <name>.calls.
    """
    def _make(name: str, output: str = "", exit_code: int = 0):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / name
        calls = bin_dir / f"{name}.calls"
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$@" >> "{calls}"\n'
            f"printf '%s' '{output}'\n"
            f"exit {exit_code}\n"
        )
        script.chmod(0o755)
        return script, calls
    return _make


@pytest.fixture
def no_tools_config(tmp_path):
    """Config whose tools don't exist: probe tiers are skipped, touch fails quietly."""
    return IngestConfig(
        mediainfo_path=tmp_path / "missing" / "mediainfo",
        touch_path=tmp_path / "missing" / "touch",
    )
