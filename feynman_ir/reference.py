"""Reference text for the accepted TikZ subset."""

from textwrap import dedent

GRAMMAR = dedent(
r"""
```
Document  := { Line }
Line      := Blank | Comment | Wrapper | Stmt [ Comment ]
Wrapper   := '\begin{tikzpicture}' [ '[' ... ']' ] | '\end{tikzpicture}'
Stmt      := Point | Edge | Curve | Ellipse | Label

Point     := '\fill' Coord 'circle' '(' NUMBER ')' ';'
Edge      := '\draw' [ Attrs ] Coord '--' Coord ';'
Curve     := '\draw' [ Attrs ] Coord '..' 'controls' Coord '..' Coord ';'
Ellipse   := '\draw' [ Attrs ] Coord 'ellipse' '(' NUMBER 'and' NUMBER ')' ';'
Label     := '\node' 'at' Coord '{' TEXT '}' ';'

Coord     := '(' NUMBER ',' NUMBER ')'
Attrs     := '[' Attr { ',' Attr } ']'
Attr      := 'draw=' ( '{rgb,255:red,' INT ';green,' INT ';blue,' INT '}' | COLORNAME )
            | 'line width=' NUMBER 'pt'
            | 'dashed' | 'dotted'
            | 'decorate' | 'decoration={snake, ...}' | 'decoration={coil, ...}'
            | Tip? '-' Tip?
            | other options (ignored)
Comment   := '%' ... ;  '% edge-arrow: <style>' selects the arrow style of the edge
```

## Units

* One text unit is 20 editor units; the text y axis points up.
* `line width` is half of the editor stroke width, in points.
* Numbers are written with two decimals.
* Coordinates and lengths are bounded by 1e9 editor units (5e7 text units);
  larger values fail the parse.

## Arrow styles

* `-{Stealth}` forward, `{Stealth}-` backward, `{Stealth}-{Stealth}` both.
* `mid-forward`, `mid-backward`, `mid-cross` are drawn with a `markings`
  postaction and recovered only from the `% edge-arrow:` comment; without it
  they read back as the native tips on the line (usually none).

## Failure

Any non-blank line that is neither a comment, a wrapper line nor one of the
five statements rejects the whole document; nothing is applied.
"""
).strip()

__all__ = ["GRAMMAR"]
