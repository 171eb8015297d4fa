from jinja2 import Environment, PackageLoader, select_autoescape
from typing import Dict

_env = Environment(
    loader=PackageLoader("taklifnoma", "page_templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def css(style: Dict[str, str]) -> str:
    """Turn a property -> value mapping into an inline style attribute value."""
    return "; ".join(f"{prop}: {value}" for prop, value in style.items())


_env.filters["css"] = css


def render_page(template_name: str, **context) -> str:
    return _env.get_template(template_name).render(**context)
