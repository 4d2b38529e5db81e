"""Rendering functions: point layers -> map artifacts.

  - layer_styles: LayerStyle, DEFAULT_LAYER_STYLES (colour/marker per layer)
  - static_map:   render_static_map (matplotlib PNG)
  - web_map:      build_web_map_html (Leaflet page via Jinja2)

Renderers take the boundary, layers and styles as arguments and never read
settings or the store.  ``web_map`` returns a string; ``static_map`` writes
only the path it is given.

Adding a renderer
-----------------
1. Create ``renderers/{name}.py`` with a build function that takes
   ``boundary``, ``layers`` and ``styles``.
2. If it produces HTML, add a Jinja2 template in ``templates/`` and call
   ``render_template("{name}.html.j2", ...)``.
3. Wire it into ``flows/build.py`` so it writes into the staging directory.
4. Add tests asserting on the returned/written content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
