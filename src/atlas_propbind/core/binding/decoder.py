# src/atlas_propbind/core/binding/decoder.py
"""
Caminho de leitura do binder (store plano → record tipado).

Este módulo define o `RecordDecoder`, que percorre os descritores de um
record, resolve a chave de cada campo, obtém (ou sintetiza) o valor via
registry de codecs e instancia o record preenchido.

Política por tipo de campo (v1):
    - MAP: coleta todas as chaves que começam com `chave + "."`;
      valores com codec escalar usam o restante da chave como chave do
      map; valores sem codec são records aninhados, particionados pelo
      primeiro segmento e decodificados recursivamente a partir de um
      store sintetizado sem o prefixo
    - LIST / SET: lê um único texto e divide em `,`; listas preservam
      ordem e duplicatas, sets deduplicam
    - SCALAR / ARRAY: lê um único texto e aplica o codec do tipo declarado

Decisões arquiteturais:
    - Todas as verificações estruturais ocorrem antes do primeiro valor
    - Ausência + obrigatório + sem default → erro fatal
    - Ausência com default pré-existente → default preservado
    - Ausência opcional sem default → escalar `None`, container vazio
    - Erros interrompem o bind imediatamente; nenhuma instância parcial
      é retornada

Invariantes:
    - `decode` nunca retorna `None`
    - O decoder nunca guarda referência ao record após retornar

Limites explícitos:
    - Não abre arquivos (ver `atlas_propbind.core.source`)
    - Não valida semântica além de tipo e obrigatoriedade
    - Suporta somente um nível de map-de-records
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping

from atlas_propbind.core.exceptions import (
    MalformedKeyError,
    MissingRequiredPropertyError,
    UnsupportedTypeError,
    ValueConversionError,
)

from .codecs import CodecRegistry, split_elements
from .descriptors import FieldDescriptor, FieldKind, describe_record, is_record_type, type_name
from .keys import SEPARATOR, KeyResolver


logger = logging.getLogger(__name__)


class RecordDecoder:
    """Popula instâncias de records a partir de um store plano."""

    def __init__(self, registry: CodecRegistry, resolver: KeyResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    def decode(self, store: Mapping[str, str], record_type: Any) -> Any:
        descriptors = describe_record(record_type)

        values: Dict[str, Any] = {}
        for d in descriptors:
            key = self._resolver.key_for(d)
            current = d.initial_value()

            if d.kind is FieldKind.MAP:
                values[d.name] = self._decode_map(store, d, key, current)
            elif d.kind in (FieldKind.LIST, FieldKind.SET):
                values[d.name] = self._decode_collection(store, d, key, current)
            else:
                values[d.name] = self._decode_scalar(store, d, key, current)

        return _instantiate(record_type, descriptors, values)

    # -----------------------------
    # Campos escalares e arrays
    # -----------------------------
    def _decode_scalar(self, store: Mapping[str, str], d: FieldDescriptor, key: str, current: Any) -> Any:
        raw = store.get(key)
        if raw is None:
            if d.required and current is None:
                raise _missing(d, key)
            return current

        codec = self._registry.get(d.declared_type)
        if codec is None:
            raise self._unsupported(d, d.declared_type)

        logger.debug("binding %s -> %s.%s", key, d.owner_type.__qualname__, d.name)
        return _convert(codec.decode, raw, d, key, d.declared_type)

    # -----------------------------
    # Listas e sets
    # -----------------------------
    def _decode_collection(self, store: Mapping[str, str], d: FieldDescriptor, key: str, current: Any) -> Any:
        raw = store.get(key)
        if raw is None:
            if d.required and current is None:
                raise _missing(d, key)
            return current if current is not None else d.container()

        codec = self._registry.get(d.element_type)
        if codec is None:
            raise self._unsupported(d, d.element_type)

        logger.debug("binding %s -> %s.%s", key, d.owner_type.__qualname__, d.name)
        return d.container(_convert(codec.decode, piece, d, key, d.element_type) for piece in split_elements(raw))

    # -----------------------------
    # Maps
    # -----------------------------
    def _decode_map(self, store: Mapping[str, str], d: FieldDescriptor, key: str, current: Any) -> Any:
        prefix = key + SEPARATOR
        matching = sorted(k for k in store if k.startswith(prefix))

        if not matching:
            if d.required and current is None:
                raise _missing(d, key)
            return current if current is not None else {}

        key_codec = self._registry.get(d.key_type)
        if key_codec is None:
            raise self._unsupported(d, d.key_type)

        result: Dict[Any, Any] = {}
        value_codec = self._registry.get(d.value_type)

        if value_codec is not None:
            for full_key in matching:
                relative = full_key[len(prefix):]
                if not relative:
                    raise _malformed(d, key, full_key)
                map_key = _convert(key_codec.decode, relative, d, full_key, d.key_type)
                result[map_key] = _convert(value_codec.decode, store[full_key], d, full_key, d.value_type)
            logger.debug("binding %s.* (%d entries) -> %s.%s", key, len(result), d.owner_type.__qualname__, d.name)
            return result

        if not is_record_type(d.value_type):
            raise self._unsupported(d, d.value_type)

        for sub_key, sub_store in _partition(d, key, matching, store).items():
            map_key = _convert(key_codec.decode, sub_key, d, prefix + sub_key, d.key_type)
            result[map_key] = self.decode(sub_store, d.value_type)

        logger.debug("binding %s.* (%d records) -> %s.%s", key, len(result), d.owner_type.__qualname__, d.name)
        return result

    def _unsupported(self, d: FieldDescriptor, tp: Any) -> UnsupportedTypeError:
        supported = self._registry.supported_types()
        return UnsupportedTypeError(
            message=(
                f"Field {d.name} in class {d.declaring_type.__qualname__} has an unsupported type "
                f"{type_name(tp)}. Supported Types are: {supported}"
            ),
            details={
                "field": d.name,
                "record_type": d.owner_type.__qualname__,
                "declaring_type": d.declaring_type.__qualname__,
                "type": type_name(tp),
                "supported_types": supported,
            },
            hint="Registre um codec para o tipo via PropertyBinder.register_codec antes do bind.",
        )


def _partition(d: FieldDescriptor, key: str, matching: List[str], store: Mapping[str, str]) -> Dict[str, Dict[str, str]]:
    """Agrupa `key.<sub>.<resto>` por `<sub>`, removendo o prefixo `key.<sub>.`."""
    prefix = key + SEPARATOR
    parts: Dict[str, Dict[str, str]] = {}
    for full_key in matching:
        head, _, rest = full_key[len(prefix):].partition(SEPARATOR)
        if not head:
            raise _malformed(d, key, full_key)
        sub_store = parts.setdefault(head, {})
        if rest:
            sub_store[rest] = store[full_key]
    return parts


def _convert(func: Callable[[str], Any], raw: str, d: FieldDescriptor, key: str, target: Any) -> Any:
    try:
        return func(raw)
    except Exception as e:
        raise ValueConversionError(
            message=f"Unable to map property {key} with value '{raw}' to {type_name(target)}",
            details={
                "field": d.name,
                "record_type": d.owner_type.__qualname__,
                "key": key,
                "value": raw,
                "type": type_name(target),
                "cause": f"{type(e).__name__}: {e}",
            },
        ) from e


def _missing(d: FieldDescriptor, key: str) -> MissingRequiredPropertyError:
    return MissingRequiredPropertyError(
        message=f"Property {key} for class {d.owner_type.__qualname__} is not set!",
        details={"key": key, "field": d.name, "record_type": d.owner_type.__qualname__},
        hint="Declare a propriedade na fonte, defina um default no record ou marque o campo com prop(required=False).",
    )


def _malformed(d: FieldDescriptor, key: str, full_key: str) -> MalformedKeyError:
    return MalformedKeyError(
        message=f"Map {key} needs a key: {full_key}",
        details={"key": full_key, "field": d.name, "record_type": d.owner_type.__qualname__},
    )


def _instantiate(record_type: Any, descriptors: List[FieldDescriptor], values: Dict[str, Any]) -> Any:
    init_values = {d.name: values[d.name] for d in descriptors if d.init}
    instance = record_type(**init_values)
    for d in descriptors:
        if not d.init:
            setattr(instance, d.name, values[d.name])
    return instance
