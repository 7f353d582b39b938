# src/atlas_propbind/core/binding/encoder.py
"""
Caminho de escrita do binder (record tipado → store plano).

Este módulo define o `RecordEncoder`, o inverso simétrico do
`RecordDecoder`: cada campo com valor presente é serializado na mesma
chave que a leitura usaria.

Política de serialização (v1):
    - Campo com codec para o tipo declarado → codec
    - MAP → achatado em `chave.<k>` (valor escalar) ou
      `chave.<k>.<subcampo>` (record aninhado, recursivo)
    - ARRAY / LIST / SET sem codec → elementos unidos por `,`
      (codec do elemento quando houver, senão `str`)
    - Demais tipos → `str(valor)`

Decisões arquiteturais:
    - Campos com `None` são ignorados; validação de obrigatoriedade é
      responsabilidade exclusiva da leitura
    - Chaves de map exigem codec escalar (erro fatal caso contrário)

Invariantes:
    - Para um record totalmente preenchido, `decode(encode(r))` é igual a `r`
      quando o mesmo registry é usado nos dois lados

Limites explícitos:
    - Não escreve arquivos (ver `PropertyBinder.save`)
    - Não ordena a saída
"""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping, Optional

from atlas_propbind.core.exceptions import MissingKeyCodecError, ValueConversionError

from .codecs import Codec, CodecRegistry, join_elements
from .descriptors import FieldDescriptor, FieldKind, describe_record, is_record_type, type_name
from .keys import SEPARATOR, KeyResolver


logger = logging.getLogger(__name__)

_SEQUENCE_KINDS = (FieldKind.ARRAY, FieldKind.LIST, FieldKind.SET)


class RecordEncoder:
    """Serializa instâncias de records em um store plano."""

    def __init__(self, registry: CodecRegistry, resolver: KeyResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    def encode_into(self, store: MutableMapping[str, str], instance: Any, prefix: str = "") -> MutableMapping[str, str]:
        for d in describe_record(type(instance)):
            value = getattr(instance, d.name, None)
            if value is None:
                continue

            key = prefix + self._resolver.key_for(d)
            codec = self._registry.get(d.declared_type)

            if codec is not None:
                store[key] = _apply(codec.encode, value, d, key)
            elif d.kind is FieldKind.MAP:
                self._encode_map(store, d, key, value)
            elif d.kind in _SEQUENCE_KINDS:
                store[key] = join_elements(self._element_text(d, key, v) for v in value)
            else:
                store[key] = str(value)

            logger.debug("writing %s.%s -> %s", d.owner_type.__qualname__, d.name, key)

        return store

    def _element_text(self, d: FieldDescriptor, key: str, value: Any) -> str:
        codec = self._codec_for(d.element_type, value)
        if codec is None:
            return str(value)
        return _apply(codec.encode, value, d, key)

    def _encode_map(self, store: MutableMapping[str, str], d: FieldDescriptor, key: str, value: Any) -> None:
        for entry_key, entry_value in value.items():
            key_codec = self._codec_for(d.key_type, entry_key)
            if key_codec is None:
                key_type = d.key_type if d.key_type is not Any else type(entry_key)
                raise MissingKeyCodecError(
                    message=(
                        f"Key of map {key} in class {d.owner_type.__qualname__} "
                        f"has unsupported type {type_name(key_type)}"
                    ),
                    details={
                        "field": d.name,
                        "record_type": d.owner_type.__qualname__,
                        "key_type": type_name(key_type),
                    },
                    hint="Registre um codec escalar para o tipo da chave do map.",
                )

            if entry_value is None:
                continue

            entry = key + SEPARATOR + _apply(key_codec.encode, entry_key, d, key)
            value_codec = self._codec_for(d.value_type, entry_value)

            if value_codec is not None:
                store[entry] = _apply(value_codec.encode, entry_value, d, entry)
            elif is_record_type(type(entry_value)):
                self.encode_into(store, entry_value, prefix=entry + SEPARATOR)
            else:
                store[entry] = str(entry_value)

    def _codec_for(self, declared: Any, value: Any) -> Optional[Codec]:
        codec = self._registry.get(declared) if declared is not Any else None
        if codec is None:
            codec = self._registry.get(type(value))
        return codec


def _apply(func: Callable[[Any], str], value: Any, d: FieldDescriptor, key: str) -> str:
    try:
        return func(value)
    except Exception as e:
        raise ValueConversionError(
            message=f"Unable to write property {key} from value {value!r}",
            details={
                "field": d.name,
                "record_type": d.owner_type.__qualname__,
                "key": key,
                "value": repr(value),
                "cause": f"{type(e).__name__}: {e}",
            },
        ) from e
