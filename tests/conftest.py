"""Shared fixtures: a small scraped-artifact tree and a store loaded from it."""

import json
from pathlib import Path

import pytest

from reactbits_mcp.loader import load_artifacts
from reactbits_mcp.query import ComponentQueryService
from reactbits_mcp.store import ComponentStore

BASE = "https://www.reactbits.dev"

COUNTER_CODE = (
    "import { motion } from 'framer-motion';\n"
    "export default function Counter({ value }) {\n"
    "  return <motion.span>{value}</motion.span>;\n"
    "}\n"
)
AURORA_CODE = "import { Renderer } from 'ogl';\nexport function aurora(el) {}\n"

ARTIFACTS = {
    "components": {
        "counter": (
            {
                "name": "Counter",
                "description": "Animated number counter with rolling digits",
                "props": {
                    "value": {"type": "number", "default": "0", "description": "Current value"}
                },
                "dependencies": ["framer-motion"],
                "url": f"{BASE}/components/counter",
                "category": "components",
                "scrapedAt": "2025-01-01T00:00:00Z",
                "previewImage": "counter-preview.png",
            },
            ("jsx", COUNTER_CODE),
        ),
        "stepper": (
            {
                "name": "Stepper",
                "description": "A multi-step wizard",
                "dependencies": ["motion", "clsx"],
                "url": f"{BASE}/components/stepper",
            },
            None,
        ),
    },
    "backgrounds": {
        "aurora": (
            {
                "name": "Aurora",
                "description": "Flowing aurora background",
                "dependencies": ["ogl"],
                "url": f"{BASE}/backgrounds/aurora",
            },
            ("js", AURORA_CODE),
        ),
        "waves": (
            {"name": "Waves", "description": "Animated line waves"},
            None,
        ),
    },
}


def write_artifact(root: Path, category: str, slug: str, data, code=None) -> Path:
    directory = root / category
    directory.mkdir(parents=True, exist_ok=True)
    json_path = directory / f"{slug}.json"
    json_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    if code is not None:
        extension, text = code
        (directory / f"{slug}.{extension}").write_text(text, encoding="utf-8")
    return json_path


@pytest.fixture
def artifact_root(tmp_path):
    root = tmp_path / "scraped-components"
    for category, items in ARTIFACTS.items():
        for slug, (data, code) in items.items():
            write_artifact(root, category, slug, data, code)
    return root


@pytest.fixture
def store(artifact_root, tmp_path):
    component_store = ComponentStore.memory()
    load_artifacts(component_store, artifact_root, base_dir=tmp_path)
    yield component_store
    component_store.close()


@pytest.fixture
def service(store, artifact_root, tmp_path):
    return ComponentQueryService(store, base_dir=tmp_path, artifacts_root=artifact_root)
