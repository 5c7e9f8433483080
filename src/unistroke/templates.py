"""Template storage: named reference strokes, normalized once at load time."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Union

import numpy as np

from unistroke.errors import DegenerateInputError, TemplateSourceError
from unistroke.normalize import PathNormalizer

logger = logging.getLogger("unistroke.templates")

TemplateSource = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


@dataclass(frozen=True)
class GestureTemplate:
    """A named reference path, already in canonical form."""
    name: str
    points: np.ndarray  # shape (num_points, 2), read-only


class TemplateLibrary:
    """Ordered collection of templates.

    Insertion order is the tie-break rule during recognition, so duplicate
    names are allowed but the first one registered wins equal distances.
    Once frozen, the library can be shared between threads without locking.
    """

    def __init__(self, normalizer: PathNormalizer):
        self._normalizer = normalizer
        self._templates: list[GestureTemplate] = []
        self._frozen = False

    def add(self, name: str, points: Any) -> GestureTemplate:
        """Normalize ``points`` and append them under ``name``."""
        if self._frozen:
            raise RuntimeError("template library is frozen")

        try:
            normalized = self._normalizer.normalize(points)
        except DegenerateInputError as e:
            raise DegenerateInputError(f"template '{name}': {e}") from e

        normalized.setflags(write=False)
        template = GestureTemplate(name=name, points=normalized)
        self._templates.append(template)
        return template

    def freeze(self):
        """Disallow further changes."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def is_empty(self) -> bool:
        return not self._templates

    @property
    def names(self) -> list[str]:
        return [t.name for t in self._templates]

    @property
    def normalizer(self) -> PathNormalizer:
        return self._normalizer

    @classmethod
    def from_source(cls, source: TemplateSource, normalizer: PathNormalizer) -> TemplateLibrary:
        """Build a library from a name -> points mapping or (name, points) pairs."""
        library = cls(normalizer)
        items = source.items() if isinstance(source, Mapping) else source
        for name, points in items:
            library.add(name, points)
        return library

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[GestureTemplate]:
        return iter(self._templates)

    def __getitem__(self, index: int) -> GestureTemplate:
        return self._templates[index]


def load_template_source(path: str | Path) -> list[tuple[str, list[tuple[float, float]]]]:
    """Read raw templates from a JSON file.

    Format:
        {"templates": [{"name": "circle", "points": [[x, y], ...]}, ...]}

    Points may also be written as ``{"x": ..., "y": ...}`` objects.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TemplateSourceError(f"could not read templates from {path}: {e}") from e

    entries = data.get("templates") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise TemplateSourceError(f"{path}: expected a 'templates' list")

    pairs = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or "name" not in entry or "points" not in entry:
            raise TemplateSourceError(f"{path}: template {i} needs 'name' and 'points'")
        name = str(entry["name"]).strip()
        if not name:
            raise TemplateSourceError(f"{path}: template {i} has an empty name")
        raw = entry["points"]
        if not isinstance(raw, list):
            raise TemplateSourceError(f"{path}: template '{name}' points must be a list")

        points = []
        for j, p in enumerate(raw):
            try:
                if isinstance(p, dict):
                    points.append((float(p["x"]), float(p["y"])))
                else:
                    x, y = p
                    points.append((float(x), float(y)))
            except (KeyError, TypeError, ValueError) as e:
                raise TemplateSourceError(
                    f"{path}: template '{name}' point {j} is invalid: {e}"
                ) from e
        pairs.append((name, points))

    logger.debug("Read %d templates from %s", len(pairs), path)
    return pairs


def save_template_source(path: str | Path, templates: TemplateSource):
    """Write raw templates to a JSON file readable by load_template_source."""
    items = templates.items() if isinstance(templates, Mapping) else templates
    data = {
        "templates": [
            {"name": name, "points": np.asarray(points, dtype=np.float64)[:, :2].tolist()}
            for name, points in items
        ]
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
