"""Shared fixtures for vibe tests."""

from typing import List, Optional

import pytest

from vibe.config import reset_config

JS_SOURCE = """const fs = require('fs');

function handleError(err) {
  console.error('Something failed while loading', err);
  return null;
}

class Database {
  connect(url) {
    this.url = url;
    return this.url !== undefined && this.url.length > 0;
  }
}

const add = (a, b) => a + b;
"""

PY_SOURCE = """class Processor:
    def process_data(self, items):
        return [item * 2 for item in items if item is not None]


def helper():
    return Processor().process_data([1, 2, 3])
"""

# Vocabulary for the fake embedder: each dimension counts one word
VOCAB = ["add", "sum", "database", "connect", "error"]


def fake_embed(calls: Optional[List[str]] = None):
    """Deterministic bag-of-words embedder over VOCAB."""
    async def embed(text: str) -> List[float]:
        if calls is not None:
            calls.append(text)
        lowered = text.lower()
        return [float(lowered.count(word)) for word in VOCAB]
    return embed


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_repo(tmp_path):
    """A small repository with JS, Python and ignored files."""
    repo = tmp_path / "repo"
    (repo / "src").mkdir(parents=True)
    (repo / "src" / "db.js").write_text(JS_SOURCE)
    (repo / "src" / "processor.py").write_text(PY_SOURCE)
    (repo / "README.md").write_text("# Sample\n\nA database connection helper project.\n")
    (repo / "notes.txt").write_text("database connect notes that should never be searched\n")
    (repo / "node_modules" / "lib").mkdir(parents=True)
    (repo / "node_modules" / "lib" / "index.js").write_text("function connectDatabase() { return 1; }\n")
    (repo / "dist").mkdir()
    (repo / "dist" / "bundle.js").write_text("function connectDatabase() { return 2; }\n")
    (repo / "package-lock.json").write_text('{"name": "database connect"}\n')
    return repo
