import re
from typing import List, Tuple

Token = Tuple[str, str, int, int]  # (type, value, line, col)


class ParseFailure(SyntaxError):
    """Raised when a text buffer is not a document of the accepted TikZ subset."""


SYMBOLS = {
    '(': 'LPAREN',
    ')': 'RPAREN',
    ',': 'COMMA',
    ';': 'SEMI',
}

WS = ' \t\r'

_cmd_re = re.compile(r'\\[A-Za-z]+')
_id_re = re.compile(r'[A-Za-z]+')
_num_re = re.compile(r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')


def _scan_balanced(s: str, start: int, line_no: int) -> int:
    """Return the index just past the bracket that closes the one at ``start``.

    ``{...}`` may nest inside ``[...]``; inside braces only braces count and
    brackets are plain content. ``\\x`` escapes one char.
    """
    closing = {'[': ']', '{': '}'}
    stack = [closing[s[start]]]
    i = start + 1
    n = len(s)
    while i < n:
        ch = s[i]
        if ch == '\\':
            i += 2
            continue
        in_braces = stack[-1] == '}'
        if ch == '{' or (ch == '[' and not in_braces):
            stack.append(closing[ch])
        elif ch == '}' or (ch == ']' and not in_braces):
            if ch != stack[-1]:
                raise ParseFailure(f'[line {line_no}, col {i + 1}] mismatched {ch!r}')
            stack.pop()
            if not stack:
                return i + 1
        i += 1
    raise ParseFailure(f'[line {line_no}, col {start + 1}] unterminated {s[start]!r}')


def tokenize_line(s: str, line_no: int) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        col = i + 1
        if ch in WS:
            i += 1
            continue
        if ch == '%':
            tokens.append(('COMMENT', s[i + 1:].strip(), line_no, col))
            break
        if ch == '\\':
            m = _cmd_re.match(s, i)
            if not m:
                raise ParseFailure(f'[line {line_no}, col {col}] expected a command name after "\\"')
            tokens.append(('CMD', m.group(0)[1:], line_no, col))
            i = m.end()
            continue
        if ch in '[{':
            end = _scan_balanced(s, i, line_no)
            kind = 'ATTRS' if ch == '[' else 'GROUP'
            tokens.append((kind, s[i + 1:end - 1], line_no, col))
            i = end
            continue
        if s.startswith('--', i):
            tokens.append(('DASHDASH', '--', line_no, col))
            i += 2
            continue
        if s.startswith('..', i):
            tokens.append(('DOTDOT', '..', line_no, col))
            i += 2
            continue
        m = _num_re.match(s, i)
        if m:
            tokens.append(('NUMBER', m.group(0), line_no, col))
            i = m.end()
            continue
        m = _id_re.match(s, i)
        if m:
            tokens.append(('ID', m.group(0), line_no, col))
            i = m.end()
            continue
        if ch in SYMBOLS:
            tokens.append((SYMBOLS[ch], ch, line_no, col))
            i += 1
            continue
        raise ParseFailure(f'[line {line_no}, col {col}] unexpected character: {ch!r}')
    return tokens
