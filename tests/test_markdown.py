"""Tests for text rendering and the catalog README in reactbits_mcp/markdown.py."""

from reactbits_mcp.markdown import (
    compose_readme,
    install_command,
    render_categories,
    render_component,
    render_component_list,
    render_search_results,
    write_readme,
)
from reactbits_mcp.models import ComponentPayload, ComponentRecord


def record(name, category, description="", dependencies=""):
    return ComponentRecord(
        name=name, category=category, raw=None, description=description, dependencies=dependencies
    )


class TestRendering:
    def test_install_command(self):
        assert install_command([]) == ""
        assert install_command(["gsap", "ogl"]) == "npm install gsap ogl"

    def test_search_results(self):
        text = render_search_results(
            [record("Orb", "backgrounds", "Glowing orb", "ogl")], "orb", "backgrounds"
        )
        assert text.startswith('Found 1 components matching "orb" in category backgrounds:\n\n')
        assert "1. **Orb** (backgrounds)\n   Glowing orb\n   Installation: `npm install ogl`" in text

    def test_missing_description(self):
        text = render_search_results([record("Orb", "backgrounds")], "orb")
        assert "No description available" in text
        assert "Installation" not in text

    def test_component_without_props_or_preview(self):
        text = render_component(record("Orb", "backgrounds"), "const a = 1;")
        assert "## Component Props" not in text
        assert "## Installation" not in text
        assert "## Preview" not in text
        assert "```jsx\nconst a = 1;\n```" in text

    def test_raw_dependencies_win(self):
        rec = ComponentRecord(
            name="Orb",
            category="backgrounds",
            raw=ComponentPayload(name="Orb", dependencies=["ogl", "three"]),
            dependencies="stale",
        )
        assert "npm install ogl three" in render_component(rec, "")

    def test_categories(self):
        assert render_categories(["components", "animations"]) == (
            "Available categories: components, animations"
        )

    def test_component_list_numbering_restarts_per_group(self):
        text = render_component_list(
            [
                record("Aurora", "backgrounds", "a"),
                record("Orb", "backgrounds", "b"),
                record("Counter", "components", "c"),
            ]
        )
        assert "## backgrounds\n\n1. **Aurora**\n   a\n\n2. **Orb**\n   b\n\n" in text
        assert "## components\n\n1. **Counter**\n   c\n\n" in text


class TestReadme:
    def test_compose_readme(self, artifact_root):
        text = compose_readme(artifact_root)
        assert text.startswith("# ReactBits Components Library")
        assert "## Components" in text
        assert "## Backgrounds" in text
        assert "## Animations" not in text
        assert "![Counter Preview](./components/counter-preview.png)" in text
        assert (
            "[View Component Details](./components/counter.json) | "
            "[View Code](./components/counter.jsx)"
        ) in text
        assert "[View Component Details](./backgrounds/waves.json)\n" in text

    def test_write_readme(self, artifact_root):
        path = write_readme(artifact_root)
        assert path == artifact_root / "README.md"
        assert "### Stepper" in path.read_text(encoding="utf-8")
