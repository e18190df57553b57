"""
Reading and writing layout documents (YAML)
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import LayoutLoadError
from .geometry import Rect, Screen
from .layout_types import Layout, WindowDescriptor
from .patterns import compile_pattern
from .positions import Bottom, Dock, Left, Maxed, Pos, Position, Right, Top

logger = logging.getLogger(__name__)

DOCK_TYPES: dict[str, type[Dock]] = {
    "Left": Left,
    "Right": Right,
    "Top": Top,
    "Bottom": Bottom,
}

POSITION_TAGS = {"!Pos", "!Maxed"} | {f"!{name}" for name in DOCK_TYPES}


class _LayoutLoader(yaml.SafeLoader):
    """Safe loader that understands !Pos, !Left, ... position tags"""


class _LayoutDumper(yaml.SafeDumper):
    """Safe dumper that writes position tags unquoted (`pos: !Pos 0,0,800,600`)"""

    def choose_scalar_style(self):
        style = super().choose_scalar_style()
        # Tagged scalars are never implicit, so PyYAML would single-quote them
        if (
            style == "'"
            and self.event.tag in POSITION_TAGS
            and not self.flow_level
            and not self.simple_key_context
            and self.analysis.allow_block_plain
        ):
            return ""
        return style


def _construct_pos(loader, node):
    return Pos(Rect.parse(loader.construct_scalar(node)))


def _construct_maxed(loader, node):
    return Maxed()


def _dock_constructor(dock_type):
    def construct(loader, node):
        return dock_type(float(loader.construct_scalar(node)))

    return construct


_LayoutLoader.add_constructor("!Pos", _construct_pos)
_LayoutLoader.add_constructor("!Maxed", _construct_maxed)
for _tag, _dock_type in DOCK_TYPES.items():
    _LayoutLoader.add_constructor(f"!{_tag}", _dock_constructor(_dock_type))


def _represent_pos(dumper, pos):
    return dumper.represent_scalar("!Pos", str(pos.rect))


def _represent_maxed(dumper, maxed):
    return dumper.represent_str("Maxed")


def _represent_dock(dumper, dock):
    return dumper.represent_scalar(f"!{type(dock).__name__}", repr(dock.fraction))


_LayoutDumper.add_representer(Pos, _represent_pos)
_LayoutDumper.add_representer(Maxed, _represent_maxed)
for _dock_type in DOCK_TYPES.values():
    _LayoutDumper.add_representer(_dock_type, _represent_dock)


def parse_position(value: Any) -> Position:
    """Accept a tagged position, "Maxed", or a one-key mapping like {Left: 0.5}"""
    if isinstance(value, (Maxed, Pos, Dock)):
        return value

    if isinstance(value, str) and value.strip() == "Maxed":
        return Maxed()

    if isinstance(value, dict) and len(value) == 1:
        kind, arg = next(iter(value.items()))
        if kind == "Maxed":
            return Maxed()
        if kind == "Pos":
            return Pos(Rect.parse(arg))
        if kind in DOCK_TYPES:
            return DOCK_TYPES[kind](float(arg))

    raise ValueError(f"Unrecognised window position: {value!r}")


class LayoutStore:
    """Loads desired layouts and serialises observed ones"""

    def load(self, path: str | Path) -> Layout:
        path = Path(path).expanduser()
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.load(f, Loader=_LayoutLoader)
            layout = self._dict_to_layout(data)
        except (OSError, yaml.YAMLError, ValueError, TypeError, KeyError) as e:
            raise LayoutLoadError(str(path), e) from e

        logger.debug(
            "Loaded %d window(s) and %d screen(s) from %s",
            len(layout.windows),
            len(layout.screens),
            path,
        )
        return layout

    def loads(self, text: str) -> Layout:
        try:
            return self._dict_to_layout(yaml.load(text, Loader=_LayoutLoader))
        except (yaml.YAMLError, ValueError, TypeError, KeyError) as e:
            raise LayoutLoadError("<string>", e) from e

    def save(self, layout: Layout) -> str:
        """Serialise `layout`; live window ids are never written"""
        data = {
            "screens": [
                {"id": screen.id, "frame": str(screen.frame)}
                for screen in layout.screens
            ],
            "windows": [
                {
                    "owner_name": window.owner_name.literal,
                    "name": window.name.literal,
                    "screen_num": window.screen_num,
                    "pos": window.pos,
                }
                for window in layout.windows
            ],
        }
        return yaml.dump(
            data,
            Dumper=_LayoutDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def save_to(self, layout: Layout, path: str | Path) -> None:
        path = Path(path).expanduser()
        path.write_text(self.save(layout), encoding="utf-8")
        logger.info("Saved layout to %s", path)

    def _dict_to_layout(self, data: Any) -> Layout:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("layout document must be a mapping")

        screens = [self._dict_to_screen(s) for s in _items(data, "screens")]
        windows = [self._dict_to_window(w) for w in _items(data, "windows")]
        return Layout(screens=screens, windows=windows)

    def _dict_to_screen(self, data: Any) -> Screen:
        if not isinstance(data, dict):
            raise ValueError(f"screen entry must be a mapping, got {data!r}")
        return Screen(id=int(data["id"]), frame=Rect.parse(data["frame"]))

    def _dict_to_window(self, data: Any) -> WindowDescriptor:
        if not isinstance(data, dict):
            raise ValueError(f"window entry must be a mapping, got {data!r}")
        if "pos" in data:
            pos = parse_position(data["pos"])
        elif "bounds" in data:
            pos = Pos(Rect.parse(data["bounds"]))
        else:
            pos = Maxed()

        return WindowDescriptor(
            owner_name=compile_pattern(data.get("owner_name")),
            name=compile_pattern(data.get("name")),
            screen_num=int(data.get("screen_num", 1)),
            pos=pos,
        )


def _items(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {value!r}")
    return value
