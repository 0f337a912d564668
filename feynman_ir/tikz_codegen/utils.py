import re
from typing import Optional, Tuple

from ..config import CodecConfig, get_codec_config
from ..geometry import Vec2

_LEADING_MATH_RE = re.compile(r'^[\s$]+')


def _escaping_backslashes(text: str) -> bool:
    """True when ``text`` ends in an odd run of backslashes."""
    return (len(text) - len(text.rstrip('\\'))) % 2 == 1


def strip_math_delimiters(text: str) -> str:
    """Strip enclosing ``$`` delimiters (and surrounding blanks) from raw label text."""
    if text is None:
        return ''
    text = _LEADING_MATH_RE.sub('', str(text))
    end = len(text)
    while end and (text[end - 1] == '$' or text[end - 1].isspace()):
        end -= 1
    # an escaped \$ or "\ " right after the content belongs to it
    if end < len(text) and _escaping_backslashes(text[:end]):
        end += 1
    return text[:end]


def _cfg(config: Optional[CodecConfig]) -> CodecConfig:
    return config or get_codec_config()


def format_number(value: float, config: Optional[CodecConfig] = None) -> str:
    return f'{value:.{_cfg(config).precision}f}'


def to_text_units(p: Vec2, config: Optional[CodecConfig] = None) -> Vec2:
    """Editor space (+y down) to text-format units (+y up), unrounded."""
    scale = _cfg(config).scale
    return p[0] / scale, -p[1] / scale


def to_editor_space(p: Vec2, config: Optional[CodecConfig] = None) -> Vec2:
    scale = _cfg(config).scale
    return p[0] * scale, -p[1] * scale


def format_coord(p: Vec2, config: Optional[CodecConfig] = None) -> str:
    x, y = to_text_units(p, config)
    return f'({format_number(x, config)}, {format_number(y, config)})'


def format_length(length: float, config: Optional[CodecConfig] = None) -> str:
    return format_number(abs(length) / _cfg(config).scale, config)


def format_line_width(width: float, config: Optional[CodecConfig] = None) -> str:
    cfg = _cfg(config)
    return f'{format_number(max(cfg.min_line_width_pt, width / 2.0), cfg)}pt'


def tikz_color(color: Tuple[int, int, int]) -> str:
    r, g, b = color
    return f'{{rgb,255:red,{r};green,{g};blue,{b}}}'
