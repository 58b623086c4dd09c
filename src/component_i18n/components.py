"""
Helpers for generated React components.

Pulls component code out of assistant replies, names components, checks
that they accept the `t` prop, and prepares the demo props the preview
renders them with.
"""

from __future__ import annotations

import re
import time
import uuid
from enum import Enum
from typing import Any

from component_i18n.extraction.base import ContextLabel

CODE_BLOCK_PATTERN = re.compile(r"```(?:tsx?|jsx?|react)?\n([\s\S]*?)\n```")

DEFAULT_EXPORT_PATTERN = re.compile(r"export default function (\w+)")

T_PROP_SIGNATURE = "t: (key: string) => string"

# Keys a navigation component is rendered with
NAVIGATION_KEYS: tuple[tuple[str, ContextLabel], ...] = (
    ("nav_home", ContextLabel.NAVIGATION),
    ("nav_about", ContextLabel.NAVIGATION),
    ("nav_services", ContextLabel.NAVIGATION),
    ("nav_contact", ContextLabel.NAVIGATION),
)


class ComponentType(str, Enum):
    """Coarse component category used to pick demo props."""

    NAVIGATION = "navigation"
    FORM = "form"
    CARD = "card"
    MODAL = "modal"
    BUTTON = "button"
    COMPONENT = "component"


# Most specific first; buttons appear inside most components so they come last
_TYPE_MARKERS: tuple[tuple[ComponentType, tuple[str, ...]], ...] = (
    (ComponentType.NAVIGATION, ("<nav", "navigation", "navbar", "menu")),
    (ComponentType.FORM, ("<form", "<input", "onsubmit")),
    (ComponentType.CARD, ("<card", "card")),
    (ComponentType.MODAL, ("<modal", "modal")),
    (ComponentType.BUTTON, ("<button", "button")),
)


def extract_component_code(message: str) -> str | None:
    """
    Get the component code from an assistant reply.

    Returns the last fenced code block that looks like a component, or None.
    """
    matches = CODE_BLOCK_PATTERN.findall(message or "")
    if not matches:
        return None
    code = matches[-1]
    if "export default" in code or "function" in code or "const" in code:
        return code
    return None


def component_name_from_prompt(prompt: str) -> str:
    """Build a PascalCase component name from the first words of a prompt."""
    cleaned = re.sub(r"[^a-zA-Z0-9\s]", "", prompt or "")
    words = cleaned.split(" ")[:3]
    return "".join(word[:1].upper() + word[1:] for word in words) + "Component"


def new_component_id() -> str:
    """Generate a component ID."""
    return f"comp_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def has_translation_prop(code: str) -> bool:
    """Check for a props interface declaring the `t` function."""
    return "interface" in code and T_PROP_SIGNATURE in code


def ensure_translation_prop(code: str) -> str:
    """
    Make sure the component declares the `t` prop.

    Adds a minimal props interface in front of the default export when the
    code has no interface at all. Code that already has an interface is
    returned unchanged.
    """
    if "interface" in code:
        return code

    match = DEFAULT_EXPORT_PATTERN.search(code)
    if not match:
        return code

    component_name = match.group(1)
    interface_def = f"interface {component_name}Props {{\n  {T_PROP_SIGNATURE};\n}}\n\n"
    declaration = f"export default function {component_name}"
    return code.replace(declaration, interface_def + declaration, 1)


def detect_component_type(code: str) -> ComponentType:
    """Classify a component from markers in its code."""
    lowered = (code or "").lower()
    for component_type, markers in _TYPE_MARKERS:
        if any(marker in lowered for marker in markers):
            return component_type
    return ComponentType.COMPONENT


def build_demo_props(component_type: ComponentType) -> dict[str, Any]:
    """
    Demo props for the preview.

    Values are source snippets the renderer evaluates; "t" stands for the
    locale lookup function.
    """
    props: dict[str, Any] = {"t": "t"}
    if component_type == ComponentType.BUTTON:
        props["onClick"] = "() => console.log('Button clicked!')"
    elif component_type == ComponentType.FORM:
        props["onSubmit"] = "() => console.log('Form submitted!')"
    return props
