# src/atlas_propbind/core/source/properties.py
"""
Formato texto `.properties` (leitura e escrita).

Este módulo converte entre o texto de um arquivo de propriedades e um
store plano (`Dict[str, str]`).

Sintaxe suportada (v1):
    - linhas de comentário iniciadas por `#` ou `!`
    - separadores `=`, `:` ou espaço em branco entre chave e valor
    - continuação de linha com `\\` final (número ímpar de barras)
    - escapes `\\t`, `\\n`, `\\r`, `\\f`, `\\uXXXX`; `\\x` vira `x`
    - espaços iniciais da linha e após o separador são ignorados

Decisões arquiteturais:
    - Não existe sintaxe de aninhamento; pontos são parte da chave
    - Chaves repetidas: a última ocorrência prevalece
    - A escrita ordena as chaves para saída determinística

Limites explícitos:
    - Não acessa o filesystem (ver `loader.py`)
    - Não interpreta tipos; todo valor é texto
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Mapping, Optional


_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
# somente `\n`, `\r` e `\r\n` terminam linhas; `\f` é espaço em branco
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _logical_lines(text: str) -> Iterator[str]:
    pending: Optional[str] = None
    for natural in _LINE_BREAK.split(text):
        line = natural.lstrip(_WHITESPACE)

        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue

        pending = None
        yield line

    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue

        nxt = text[i + 1]
        if nxt == "u":
            code = text[i + 2:i + 6]
            if len(code) != 4:
                raise ValueError(f"Malformed \\uxxxx encoding: {text[i:]!r}")
            out.append(chr(int(code, 16)))
            i += 6
            continue

        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_line(line: str) -> tuple:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def parse_properties(text: str) -> Dict[str, str]:
    """
    Interpreta o texto de um arquivo `.properties`.

    Args:
        text (str): Conteúdo completo do arquivo.

    Returns:
        Dict[str, str]: Store plano com chaves e valores já desescapados.

    Raises:
        ValueError: Se um escape `\\uXXXX` estiver malformado.
    """
    store: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_line(line)
        store[_unescape(key)] = _unescape(value)
    return store


def _escape(text: str, *, is_key: bool) -> str:
    out: List[str] = []
    for i, ch in enumerate(text):
        if ch == "\\":
            out.append("\\\\")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\f":
            out.append("\\f")
        elif ch == " " and (is_key or i == 0):
            out.append("\\ ")
        elif ch in "=:#!" and (is_key or i == 0):
            out.append("\\" + ch)
        else:
            out.append(ch)
    return "".join(out)


def dump_properties(store: Mapping[str, str], *, header: Optional[str] = None) -> str:
    """
    Serializa um store plano no formato `.properties`.

    As chaves são ordenadas; cada linha tem a forma `chave=valor`.
    Um `header` opcional é emitido como comentário `#` (uma linha por
    linha do texto).
    """
    lines: List[str] = []
    if header:
        lines.extend(f"# {h}" for h in _LINE_BREAK.split(header))
    for key in sorted(store):
        lines.append(f"{_escape(key, is_key=True)}={_escape(store[key], is_key=False)}")
    return "\n".join(lines) + "\n"
