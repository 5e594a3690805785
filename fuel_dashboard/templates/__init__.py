"""
Jinja2 templates for the rendered dashboard.
"""
from pathlib import Path

# Template directory
TEMPLATE_DIR = Path(__file__).parent

# Available templates
TEMPLATES = {
    "dashboard": "dashboard.html.j2",
}


def load_template(name: str) -> str:
    """Read a template's source by its short name."""
    if name not in TEMPLATES:
        raise KeyError(f"Unknown template: {name}. Valid: {list(TEMPLATES.keys())}")
    path = TEMPLATE_DIR / TEMPLATES[name]
    if not path.exists():
        raise FileNotFoundError(f"Template not found: {path}")
    return path.read_text(encoding="utf-8")
