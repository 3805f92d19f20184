from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import numpy as np
import pytest
from anndata import AnnData

import scbook
from scbook import (
    CacheMissError,
    ChunkCache,
    ChunkNotFoundError,
    ObjectNotFoundError,
    extract_cached,
    load_cached,
    read_chunks,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

QC = """
    # Quality control

    ```{python load}
    x = load()
    ```

    ```{python unref-setup}
    w = 0
    ```

    ```{python clean}
    y = f(x)
    ```

    ```{python plot}
    plot(y)
    ```
    """


@pytest.fixture
def qc(write_document: Callable[..., Path]) -> Path:
    """A rendered document with a complete cache."""
    path = write_document("qc.qmd", QC)
    chunks = read_chunks(path)
    cache = ChunkCache.for_document(path)
    cache.write(chunks["load"], dict(x=1))
    cache.write(chunks["clean"], dict(y=2))
    cache.write(chunks["plot"], {})
    return path


def test_end_to_end(qc: Path):
    envir = {}
    history = extract_cached("qc", "clean", ["y"], envir=envir, show=False)
    assert envir == {"y": 2}
    assert history == (
        '<button class="scbook-collapse">View history</button>\n'
        '<div class="scbook-content">\n'
        "\n"
        "```python\n"
        "#--- load ---#\n"
        "x = load()\n"
        "\n"
        "#--- clean ---#\n"
        "y = f(x)\n"
        "```\n"
        "\n"
        "</div>\n"
    )
    assert "plot" not in history
    assert "unref" not in history


def test_show(qc: Path, capsys: pytest.CaptureFixture):
    envir = {}
    assert extract_cached("qc", "plot", "x", envir=envir) is None
    out = capsys.readouterr().out
    assert out == extract_cached("qc", "plot", "x", envir={}, show=False)
    assert "#--- plot ---#\nplot(y)\n```" in out


def test_show_setting(qc: Path, capsys: pytest.CaptureFixture):
    scbook.settings.autoshow = False
    assert extract_cached("qc", "load", "x", envir={}) is not None
    assert capsys.readouterr().out == ""


def test_object_from_earlier_chunk(qc: Path):
    envir = {}
    extract_cached("qc", "plot", ["x", "y"], envir=envir, show=False)
    assert envir == {"x": 1, "y": 2}


def test_default_envir(qc: Path):
    main = sys.modules["__main__"]
    assert not hasattr(main, "y")
    try:
        extract_cached("qc", "clean", "y", show=False)
        assert main.y == 2
    finally:
        main.__dict__.pop("y", None)


def test_idempotent(qc: Path):
    envir1, envir2 = {}, {}
    history1 = extract_cached("qc", "plot", ["x", "y"], envir=envir1, show=False)
    history2 = extract_cached("qc", "plot", ["x", "y"], envir=envir2, show=False)
    assert envir1 == envir2
    assert history1 == history2


def test_load_cached(qc: Path):
    assert load_cached("qc", "clean", ["x", "y"]) == {"x": 1, "y": 2}
    assert load_cached("qc", "clean", "x") == {"x": 1}


def test_missing_chunk(qc: Path):
    envir = {}
    with pytest.raises(ChunkNotFoundError, match=r"could not find chunk 'nope'"):
        extract_cached("qc", "nope", ["x"], envir=envir, show=False)
    assert envir == {}


def test_unref_chunk_is_no_target(qc: Path):
    with pytest.raises(ChunkNotFoundError, match=r"unref-setup"):
        extract_cached("qc", "unref-setup", ["x"], envir={}, show=False)


def test_unref_assignment_not_found(qc: Path):
    with pytest.raises(ObjectNotFoundError, match=r"could not find 'w'"):
        extract_cached("qc", "plot", ["w"], envir={}, show=False)


def test_object_after_target(qc: Path):
    """Chunks after the requested one are never searched."""
    with pytest.raises(ObjectNotFoundError, match=r"could not find 'y'"):
        extract_cached("qc", "load", ["y"], envir={}, show=False)


def test_partial_binding(qc: Path):
    envir = {}
    with pytest.raises(ObjectNotFoundError, match=r"could not find 'nope'"):
        extract_cached("qc", "plot", ["x", "nope", "y"], envir=envir, show=False)
    assert envir == {"x": 1}


def test_no_fallback_on_cache_miss(write_document: Callable[..., Path]):
    path = write_document(
        "twice.qmd",
        """
        ```{python b1}
        x = 1
        ```

        ```{python b2}
        x = x + 1
        ```
        """,
    )
    chunks = read_chunks(path)
    cache = ChunkCache.for_document(path)
    cache.write(chunks["b1"], dict(x=1))

    # b1 alone is fine
    assert load_cached("twice", "b1", "x") == {"x": 1}
    # b2 is authoritative but has no cache entry
    envir = {}
    with pytest.raises(CacheMissError, match=r"'b2'"):
        extract_cached("twice", "b2", ["x"], envir=envir, show=False)
    assert envir == {}

    cache.write(chunks["b2"], dict(x=2))
    assert load_cached("twice", "b2", "x") == {"x": 2}


def test_workflow_document(write_document: Callable[..., Path]):
    path = write_document(
        "../workflows/pbmc.qmd",
        """
        ```{python setup}
        adata = read()
        ```
        """,
    )
    adata = AnnData(np.ones((3, 2), dtype=np.float32))
    ChunkCache.for_document(path).write(read_chunks(path)["setup"], dict(adata=adata))

    envir = {}
    extract_cached("pbmc", "setup", "adata", envir=envir, show=False)
    assert envir["adata"].shape == (3, 2)

    with pytest.raises(FileNotFoundError):
        extract_cached("pbmc", "setup", "adata", envir={}, flexible=False)


def test_logging(qc: Path, caplog: pytest.LogCaptureFixture):
    scbook.settings.verbosity = "debug"
    extract_cached("qc", "clean", ["y"], envir={}, show=False)
    assert "'y' was last assigned in chunk 'clean'" in caplog.text
    assert "extracting y from 'qc' at 'clean'" in caplog.text


@pytest.mark.parametrize("name", ["", "adata.obs", "1x", None])
def test_invalid_object_name(qc: Path, name):
    envir = {}
    with pytest.raises(ValueError, match=r"is not a valid variable name"):
        extract_cached("qc", "plot", ["x", name], envir=envir, show=False)
    assert envir == {}
    with pytest.raises(ValueError, match=r"is not a valid variable name"):
        load_cached("qc", "plot", [name])
