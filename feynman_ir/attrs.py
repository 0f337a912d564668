"""Recognition of ``\\draw[...]`` option lists and ``% edge-arrow:`` comments."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import CodecConfig, get_codec_config
from .validate import ARROW_STYLES

logger = logging.getLogger(__name__)

NAMED_COLORS = {
    'black': (0, 0, 0),
    'white': (255, 255, 255),
    'red': (255, 0, 0),
    'green': (0, 255, 0),
    'blue': (0, 0, 255),
    'cyan': (0, 255, 255),
    'magenta': (255, 0, 255),
    'yellow': (255, 255, 0),
    'gray': (128, 128, 128),
}

TIP_NAMES = {'latex', 'stealth', 'to', 'triangle', 'straight', 'kite', 'circle'}

_RGB_RE = re.compile(r'^\{?rgb,255:red,(\d+);green,(\d+);blue,(\d+)\}?$')
_WIDTH_RE = re.compile(r'^(\d+(?:\.\d*)?|\.\d+)pt$')
_TIP = r'(?:<|>|\{[^{}]*\}|[A-Za-z]+)'
_ARROW_RE = re.compile(rf'^(?P<left>{_TIP})?-(?P<right>{_TIP})?$')
_COMMENT_RE = re.compile(r'^(?P<key>[A-Za-z][A-Za-z-]*)\s*:\s*(?P<value>[A-Za-z-]+)\s*$')


@dataclass
class DrawAttrs:
    stroke_kind: str = 'solid'
    arrow: str = 'none'
    color: Tuple[int, int, int] = (0, 0, 0)
    stroke_width: float = 2.0


def split_attrs(raw: str) -> List[str]:
    """Split an option list on commas outside braces and brackets."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    escaped = False
    for ch in raw:
        if escaped:
            escaped = False
            current.append(ch)
            continue
        if ch == '\\':
            escaped = True
        elif ch in '{[':
            depth += 1
        elif ch in '}]':
            depth -= 1
        elif ch == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append(''.join(current).strip())
    return [p for p in parts if p]


def _parse_color(value: str) -> Optional[Tuple[int, int, int]]:
    compact = re.sub(r'\s+', '', value)
    m = _RGB_RE.match(compact)
    if m:
        return int(m.group(1)), int(m.group(2)), int(m.group(3))
    return NAMED_COLORS.get(compact.lower())


def _is_tip(tip: Optional[str]) -> bool:
    if not tip:
        return False
    if tip in ('<', '>') or tip.startswith('{'):
        return True
    return tip.lower() in TIP_NAMES


def native_arrow(entry: str) -> Optional[str]:
    """Arrow style written with TikZ tip syntax (``->``, ``{Stealth}-`` ...), if any."""
    m = _ARROW_RE.match(entry.replace(' ', ''))
    if not m:
        return None
    left = m.group('left')
    right = m.group('right')
    if (left and not _is_tip(left)) or (right and not _is_tip(right)):
        return None
    if left and right:
        return 'both'
    if right:
        return 'forward'
    if left:
        return 'backward'
    return 'none'


def parse_draw_attrs(raw: str, config: Optional[CodecConfig] = None) -> DrawAttrs:
    cfg = config or get_codec_config()
    attrs = DrawAttrs(stroke_width=cfg.default_stroke_width)
    flags = set()
    for entry in split_attrs(raw):
        if '=' in entry:
            key, _, value = entry.partition('=')
            key = ' '.join(key.split()).lower()
            value = value.strip()
            if key in ('draw', 'color'):
                color = _parse_color(value)
                if color is None:
                    logger.debug('Ignoring unsupported color %r', value)
                else:
                    attrs.color = color
            elif key == 'line width':
                m = _WIDTH_RE.match(value.replace(' ', ''))
                if not m:
                    raise ValueError(f'unsupported line width {value!r}')
                width = float(m.group(1)) * 2.0
                if not math.isfinite(width):
                    raise ValueError(f'line width {value!r} is not finite')
                attrs.stroke_width = width
            elif key == 'decoration':
                if re.search(r'\bsnake\b', value):
                    flags.add('wavy')
                elif re.search(r'\bcoil\b', value):
                    flags.add('spring')
            else:
                logger.debug('Ignoring option %r', entry)
            continue

        word = ' '.join(entry.split()).lower()
        if word.endswith('dashed'):
            flags.add('dashed')
        elif word.endswith('dotted'):
            flags.add('dotted')
        else:
            arrow = native_arrow(entry)
            if arrow is not None:
                attrs.arrow = arrow
            elif word != 'decorate':
                logger.debug('Ignoring option %r', entry)

    for kind in ('dashed', 'dotted', 'wavy', 'spring'):
        if kind in flags:
            attrs.stroke_kind = kind
            break
    return attrs


def is_arrow_comment(comment: str, config: Optional[CodecConfig] = None) -> bool:
    cfg = config or get_codec_config()
    m = _COMMENT_RE.match(comment.strip())
    return bool(m) and m.group('key').lower() == cfg.arrow_comment_key


def arrow_from_comment(comment: str, config: Optional[CodecConfig] = None) -> Optional[str]:
    """Arrow style carried by a ``edge-arrow: <style>`` comment, or None."""
    if not is_arrow_comment(comment, config):
        return None
    style = _COMMENT_RE.match(comment.strip()).group('value').lower()
    if style not in ARROW_STYLES:
        logger.warning('Ignoring unknown arrow style %r in comment', style)
        return None
    return style
