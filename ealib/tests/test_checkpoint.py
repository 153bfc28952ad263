"""Tests for population checkpoints."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest
from numpy.random import Generator

from ealib.archive.checkpoint import (
    checkpoint_path,
    load_population,
    read_checkpoint_generation,
    save_population,
)
from ealib.archive.errors import FormatError, ParseError, ResourceError
from ealib.config import Config
from ealib.evolution.genome import Bitstring
from ealib.evolution.individual import Individual


@pytest.fixture
def rng() -> Generator:
    """Seeded random generator."""

    return np.random.default_rng(seed=42)


def _population(rng: Generator, size: int = 6) -> list[Individual]:
    individuals = []
    for i in range(size):
        ind = Individual(Bitstring.random(32, rng=rng), name=i, generation=4.0)
        if i % 2 == 0:
            ind.fitness.set(float(rng.uniform(0.0, 10.0)))
        ind.metadata.put("slot", i)
        individuals.append(ind)
    return individuals


def test_population_roundtrip(tmp_path, rng: Generator) -> None:
    individuals = _population(rng)
    path = save_population(tmp_path / "nested" / "gen.json", individuals, generation=4)
    assert path.is_file()

    restored = load_population(path, Bitstring)
    assert restored == individuals
    assert [ind.fitness.is_null() for ind in restored] == [False, True] * 3
    assert read_checkpoint_generation(path) == 4


def test_generation_optional(tmp_path, rng: Generator) -> None:
    path = save_population(tmp_path / "gen.json", _population(rng, 2))
    assert read_checkpoint_generation(path) is None


def test_empty_population(tmp_path) -> None:
    path = save_population(tmp_path / "empty.json", [])
    assert load_population(path, Bitstring) == []


def test_document_layout(tmp_path, rng: Generator) -> None:
    path = save_population(tmp_path / "gen.json", _population(rng, 2), generation=1)
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    root = document["population"]
    assert list(root) == ["size", "generation", "individuals"]
    assert root["size"] == 2
    assert "fitness" in root["individuals"][0]
    assert "fitness" not in root["individuals"][1]


def test_size_mismatch_rejected(tmp_path, rng: Generator) -> None:
    path = save_population(tmp_path / "gen.json", _population(rng, 3))
    document = json.loads(path.read_text(encoding="utf-8"))
    document["population"]["size"] = 4
    path.write_text(json.dumps(document), encoding="utf-8")
    with pytest.raises(FormatError):
        load_population(path, Bitstring)


def test_corrupt_member_rejected(tmp_path, rng: Generator) -> None:
    path = save_population(tmp_path / "gen.json", _population(rng, 3))
    document = json.loads(path.read_text(encoding="utf-8"))
    document["population"]["individuals"][1]["representation"] = "32 1 0"
    path.write_text(json.dumps(document), encoding="utf-8")
    with pytest.raises(ParseError):
        load_population(path, Bitstring)


def test_missing_checkpoint(tmp_path) -> None:
    with pytest.raises(ResourceError):
        load_population(tmp_path / "missing.json")
    with pytest.raises(ResourceError):
        read_checkpoint_generation(tmp_path / "missing.json")


def test_read_failures_are_logged(tmp_path, caplog) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"population": {"generation": "four"}}', encoding="utf-8")
    with caplog.at_level("WARNING", logger="ealib.archive.checkpoint"):
        with pytest.raises(ParseError):
            read_checkpoint_generation(path)
        with pytest.raises(FormatError):
            load_population(path)
    assert "Failed to read checkpoint generation" in caplog.text
    assert "Failed to load population" in caplog.text


def test_checkpoint_path(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(Config, "CHECKPOINT_DIR", str(tmp_path / "ckpt"))
    assert checkpoint_path(7) == tmp_path / "ckpt" / "population_gen_0007.json"
    assert checkpoint_path(12, directory=tmp_path) == tmp_path / "population_gen_0012.json"
