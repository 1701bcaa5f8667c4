"""
Serialization helpers for manifest objects.

Provides JSON/YAML output via an intermediate dict that mirrors the
package.json layout, and a helper that merges the generated fragment into an
existing package.json on disk.

Fields left as None are omitted, activation events are sorted, and JSON keys
are emitted in a stable order, so regenerating an unchanged manifest is a
byte-for-byte no-op.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from contributions.manifest import (
    CommandContribution,
    Icon,
    MenuItemContribution,
    PackageJson,
    ThemeMap,
)

logger = logging.getLogger(__name__)

_THEME_KEYS = {
    "light": "light",
    "dark": "dark",
    "high_contrast": "highContrast",
    "high_contrast_dark": "highContrastDark",
}


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def icon_to_dict(icon: Icon | None) -> Any:
    if icon is None or isinstance(icon, str):
        return icon
    if isinstance(icon, ThemeMap):
        return _compact({json_key: getattr(icon, attr) for attr, json_key in _THEME_KEYS.items()})
    raise TypeError(f"Unsupported icon type: {type(icon)}")


def icon_from_dict(d: Any) -> Icon | None:
    if d is None or isinstance(d, str):
        return d
    return ThemeMap(**{attr: d.get(json_key) for attr, json_key in _THEME_KEYS.items()})


def command_to_dict(c: CommandContribution) -> Dict[str, Any]:
    return _compact({
        "command": c.command,
        "title": c.title,
        "category": c.category,
        "icon": icon_to_dict(c.icon),
    })


def command_from_dict(d: Dict[str, Any]) -> CommandContribution:
    return CommandContribution(
        command=d["command"],
        title=d.get("title"),
        category=d.get("category"),
        icon=icon_from_dict(d.get("icon")),
    )


def menu_item_to_dict(m: MenuItemContribution) -> Dict[str, Any]:
    return _compact({"command": m.command, "alt": m.alt, "when": m.when, "group": m.group})


def menu_item_from_dict(d: Dict[str, Any]) -> MenuItemContribution:
    return MenuItemContribution(command=d["command"], alt=d.get("alt"), when=d.get("when"), group=d.get("group"))


def package_json_to_dict(p: PackageJson) -> Dict[str, Any]:
    contributes: Dict[str, Any] = {}
    if p.commands:
        contributes["commands"] = [command_to_dict(c) for c in p.commands]
    if p.menus:
        contributes["menus"] = {
            menu_id: [menu_item_to_dict(m) for m in items] for menu_id, items in p.menus.items()
        }
    return {
        "activationEvents": sorted(p.activation_events),
        "contributes": contributes,
    }


def package_json_from_dict(d: Dict[str, Any]) -> PackageJson:
    contributes = d.get("contributes", {})
    p = PackageJson(activation_events=set(d.get("activationEvents", [])))
    p.commands = [command_from_dict(c) for c in contributes.get("commands", [])]
    p.menus = {
        menu_id: [menu_item_from_dict(m) for m in items]
        for menu_id, items in contributes.get("menus", {}).items()
    }
    return p


def package_json_to_json(p: PackageJson, indent: int | None = 2) -> str:
    return json.dumps(package_json_to_dict(p), indent=indent)


def package_json_from_json(s: str) -> PackageJson:
    return package_json_from_dict(json.loads(s))


def package_json_to_yaml(p: PackageJson) -> str:
    return yaml.safe_dump(package_json_to_dict(p), sort_keys=False)


def package_json_from_yaml(s: str) -> PackageJson:
    return package_json_from_dict(yaml.safe_load(s) or {})


def merge_manifest(existing: Dict[str, Any], fragment: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay a generated fragment onto an existing manifest dict.

    Generated commands and menus replace entries for the same command ID
    (or menu ID); hand-written entries for other IDs are kept. Activation
    events are unioned. Other top-level keys are untouched.
    """
    merged = dict(existing)

    events: List[str] = list(existing.get("activationEvents", []))
    for event in fragment.get("activationEvents", []):
        if event not in events:
            events.append(event)
    merged["activationEvents"] = events

    contributes = dict(existing.get("contributes", {}))
    generated = fragment.get("contributes", {})

    if "commands" in generated:
        ids = {c["command"] for c in generated["commands"]}
        kept = [c for c in contributes.get("commands", []) if c.get("command") not in ids]
        contributes["commands"] = kept + generated["commands"]

    if "menus" in generated:
        menus = dict(contributes.get("menus", {}))
        menus.update(generated["menus"])
        contributes["menus"] = menus

    merged["contributes"] = contributes
    return merged


def merge_package_json(path: str | Path, fragment: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge a generated fragment into a package.json file in place.

    Returns:
        The merged manifest that was written
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        existing = json.load(f)

    merged = merge_manifest(existing, fragment)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(merged, f, indent=2)
        f.write("\n")

    logger.info("Merged %d activation events into %s", len(fragment.get("activationEvents", [])), path)
    return merged
