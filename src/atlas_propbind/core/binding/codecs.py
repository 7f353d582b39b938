# src/atlas_propbind/core/binding/codecs.py
"""
Registry de codecs de tipos.

Este módulo define o `CodecRegistry`, responsável por associar cada tipo
alvo a um par de funções puras (texto → valor, valor → texto).

Defaults (v1):
    - str            → identidade
    - int            → inteiro base 10
    - numpy.int64    → inteiro longo (falha em overflow)
    - numpy.float32  → ponto flutuante de precisão simples
    - float          → ponto flutuante de precisão dupla
    - bool           → "true" (case-insensitive) é True; qualquer outro texto é False
    - tuple[T, ...]  → arrays homogêneos de cada tipo acima

Decisões arquiteturais:
    - O registry pertence a uma instância do binder (não é global)
    - `register` substitui qualquer entrada existente para o tipo
    - Não existe remoção de entradas
    - Arrays, listas e sets dividem o texto em `,` literal, sem escape
    - Texto vazio é uma sequência vazia; por isso `("",)` não sobrevive
      ao ciclo escrita → leitura
    - A sintaxe decimal é independente de locale
    - Números aceitam somente dígitos ASCII, sem separador `_`
    - Espaço nas bordas de um número é erro de conversão

Invariantes:
    - Um codec registrado é usado para todo campo daquele tipo exato
      durante a vida da instância
    - `supported_types()` é sempre ordenado

Limites explícitos:
    - Não resolve chaves
    - Não conhece records nem maps (ver decoder/encoder)
    - Não oferece sincronização entre threads
"""

from __future__ import annotations

import re
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .descriptors import type_name


ELEMENT_SEPARATOR = ","

_INTEGER = re.compile(r"[+-]?[0-9]+")

Decoder = Callable[[str], Any]
Encoder = Callable[[Any], str]


@dataclass(frozen=True)
class Codec:
    """Par de funções de conversão para um tipo."""

    decode: Decoder
    encode: Encoder = str


def decode_bool(text: str) -> bool:
    # Parse permissivo legado: somente "true" (qualquer caixa) é True.
    return text.lower() == "true"


def encode_bool(value: Any) -> str:
    return "true" if value else "false"


def decode_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer literal: {text!r}")
    return int(text, 10)


def decode_long(text: str) -> np.int64:
    return np.int64(decode_int(text))


def _plain_float(text: str) -> str:
    if "_" in text or not text.isascii() or text != text.strip():
        raise ValueError(f"invalid floating point literal: {text!r}")
    return text


def decode_double(text: str) -> float:
    return float(_plain_float(text))


def decode_single(text: str) -> np.float32:
    return np.float32(_plain_float(text))


def split_elements(text: str) -> List[str]:
    # texto vazio é a forma escrita de uma sequência vazia
    if not text:
        return []
    return text.split(ELEMENT_SEPARATOR)


def join_elements(texts) -> str:
    return ELEMENT_SEPARATOR.join(texts)


def canonical_type(tp: Any) -> Any:
    """Normaliza `typing.Tuple[X, ...]` para o alias builtin `tuple[X, ...]`."""
    if typing.get_origin(tp) is tuple:
        args = typing.get_args(tp)
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple[args[0], ...]
    return tp


def array_codec(element: Codec) -> Codec:
    """Deriva o codec de `tuple[T, ...]` a partir do codec de `T`."""

    def decode(text: str) -> tuple:
        return tuple(element.decode(piece) for piece in split_elements(text))

    def encode(values: Any) -> str:
        return join_elements(element.encode(v) for v in values)

    return Codec(decode=decode, encode=encode)


@dataclass
class CodecRegistry:
    """
    Registro mutável de codecs, escopado a uma instância do binder.

    Decisões arquiteturais:
        - Chaves são objetos de tipo; arrays usam o alias `tuple[T, ...]`
        - Nenhuma sincronização é aplicada; chamadas concorrentes de
          `register` a partir de várias threads competem entre si

    Limites explícitos:
        - Não decide fallback de serialização (responsabilidade do encoder)
    """

    _codecs: Dict[Any, Codec] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def with_defaults(cls) -> "CodecRegistry":
        registry = cls()
        registry.register(str, str, str)
        registry.register(int, decode_int, str)
        registry.register(np.int64, decode_long, str)
        registry.register(np.float32, decode_single, str)
        registry.register(float, decode_double, repr)
        registry.register(bool, decode_bool, encode_bool)

        for tp in (str, int, np.int64, np.float32, float, bool):
            registry.register_array(tp)

        return registry

    def register(self, tp: Any, decode: Decoder, encode: Encoder = str) -> None:
        self._codecs[canonical_type(tp)] = Codec(decode=decode, encode=encode)

    def register_array(self, element_type: Any) -> None:
        element = self.get(element_type)
        if element is None:
            raise KeyError(f"No codec registered for array element type {type_name(element_type)}")
        self._codecs[tuple[element_type, ...]] = array_codec(element)

    def get(self, tp: Any) -> Optional[Codec]:
        try:
            return self._codecs.get(canonical_type(tp))
        except TypeError:
            # tipos não-hasheáveis nunca estão registrados
            return None

    def has(self, tp: Any) -> bool:
        return self.get(tp) is not None

    def decoder_for(self, tp: Any) -> Optional[Decoder]:
        codec = self.get(tp)
        return codec.decode if codec is not None else None

    def encoder_for(self, tp: Any) -> Optional[Encoder]:
        codec = self.get(tp)
        return codec.encode if codec is not None else None

    def supported_types(self) -> List[str]:
        names = {type_name(tp) for tp in self._codecs}
        names.update({"dict", "list", "set"})
        return sorted(names)
