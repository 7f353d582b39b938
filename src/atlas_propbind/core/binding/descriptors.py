# src/atlas_propbind/core/binding/descriptors.py
"""
Descritores de campos bindáveis.

Este módulo deriva, a partir de um tipo de record (dataclass), a lista
ordenada de `FieldDescriptor` consumida pelo decoder, pelo encoder e
pelo resolvedor de chaves.

Responsabilidades do módulo:
    - Enumerar os campos bindáveis na ordem natural da dataclass
    - Classificar o tipo declarado (escalar, array, lista, set, map)
    - Identificar a classe que declara cada campo (para namespaces)
    - Validar regras estruturais antes de qualquer processamento de valor

Decisões arquiteturais:
    - Descritores são derivados sob demanda a cada `read`/`write`;
      não existe cache entre chamadas, então sempre refletem a definição
      atual do tipo
    - `Optional[X]` e `Annotated[X, ...]` são desembrulhados para `X`
    - Containers sem parâmetros usam `str` como tipo de elemento
    - Arrays homogêneos são representados por `tuple[X, ...]`

Invariantes:
    - Um descritor é imutável após derivado
    - Violações estruturais são detectadas para o tipo inteiro antes
      do primeiro valor ser lido

Limites explícitos:
    - Não lê nem escreve valores
    - Não resolve chaves
    - Não consulta o registry de codecs
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from atlas_propbind.core.exceptions import InvalidRecordTypeError, StructuralFieldError

from .metadata import property_meta


class FieldKind(str, Enum):
    """
    Classificação do tipo declarado de um campo.

    Tipos definidos:
        - SCALAR: valor único convertido por codec
        - ARRAY: `tuple[X, ...]`, convertido por codec próprio
        - LIST: sequência ordenada, preserva duplicatas
        - SET: conjunto, deduplica por igualdade
        - MAP: mapeamento chave → valor (escalar ou record aninhado)
    """
    SCALAR = "scalar"
    ARRAY = "array"
    LIST = "list"
    SET = "set"
    MAP = "map"


_LIST_ORIGINS = {list, collections.abc.Sequence, collections.abc.MutableSequence}
_SET_ORIGINS = {set, frozenset, collections.abc.Set, collections.abc.MutableSet}
_MAP_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}
_BARE_CONTAINERS = {list, set, frozenset, dict, tuple}
_UNION_ORIGINS = {typing.Union, types.UnionType}


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Descritor imutável de um campo bindável.

    Campos:
        - name: nome do atributo
        - kind: classificação do tipo declarado
        - declared_type: tipo normalizado usado na busca de codec
        - owner_type: record sendo bindado
        - declaring_type: classe (na MRO) que declara o campo
        - key_override: chave customizada via `prop(name=...)`
        - required: obrigatoriedade (default: True)
        - element_type / key_type / value_type: parâmetros do container
        - container: construtor do container (list, set, frozenset, tuple, dict)
        - init: se o campo é parâmetro do `__init__` da dataclass
    """

    name: str
    kind: FieldKind
    declared_type: Any
    owner_type: type
    declaring_type: type
    key_override: Optional[str]
    required: bool
    element_type: Any = None
    key_type: Any = None
    value_type: Any = None
    container: Any = None
    init: bool = True
    source_field: Any = field(default=None, repr=False, compare=False)

    def initial_value(self) -> Any:
        """Default pré-existente do campo (`None` quando não houver)."""
        f = self.source_field
        if f is None:
            return None
        if f.default is not dataclasses.MISSING:
            return f.default
        if f.default_factory is not dataclasses.MISSING:
            return f.default_factory()
        return None


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def type_name(tp: Any) -> str:
    """Nome legível de um tipo (usado em mensagens e em `supported_types`)."""
    if isinstance(tp, type) and not isinstance(tp, types.GenericAlias):
        return tp.__name__
    return repr(tp).replace("typing.", "")


def unwrap_type(hint: Any) -> Any:
    """Remove `Annotated[...]` e `Optional[...]` de uma anotação."""
    origin = typing.get_origin(hint)
    if origin is typing.Annotated:
        return unwrap_type(typing.get_args(hint)[0])
    if origin in _UNION_ORIGINS:
        args = typing.get_args(hint)
        others = [a for a in args if a is not type(None)]
        if len(others) == 1 and len(others) != len(args):
            return unwrap_type(others[0])
    return hint


def classify(hint: Any) -> Tuple[FieldKind, Any, dict]:
    """
    Classifica uma anotação já desembrulhada.

    Returns:
        (kind, declared_type, extras): `extras` contém os parâmetros do
        container (`element_type`, `key_type`, `value_type`, `container`).
    """
    if hint in _BARE_CONTAINERS:
        origin, args = hint, ()
    else:
        origin, args = typing.get_origin(hint), typing.get_args(hint)

    if origin in _LIST_ORIGINS:
        element = unwrap_type(args[0]) if args else str
        return FieldKind.LIST, list[element], {"element_type": element, "container": list}

    if origin in _SET_ORIGINS:
        element = unwrap_type(args[0]) if args else str
        container = frozenset if origin is frozenset else set
        return FieldKind.SET, container[element], {"element_type": element, "container": container}

    if origin in _MAP_ORIGINS:
        key_type, value_type = (unwrap_type(args[0]), unwrap_type(args[1])) if len(args) == 2 else (str, str)
        return FieldKind.MAP, dict[key_type, value_type], {
            "key_type": key_type,
            "value_type": value_type,
            "container": dict,
        }

    if origin is tuple:
        if not args:
            return FieldKind.ARRAY, tuple[str, ...], {"element_type": str, "container": tuple}
        if len(args) == 2 and args[1] is Ellipsis:
            element = unwrap_type(args[0])
            return FieldKind.ARRAY, tuple[element, ...], {"element_type": element, "container": tuple}

    return FieldKind.SCALAR, hint, {}


def _declaring_type(record_type: type, name: str) -> type:
    for klass in record_type.__mro__:
        if klass is object:
            break
        if name in inspect.get_annotations(klass):
            return klass
    return record_type


def _structural_error(name: str, declaring_type: type, problem: str) -> StructuralFieldError:
    return StructuralFieldError(
        message=f"Field {name} in class {declaring_type.__qualname__} {problem}",
        details={"field": name, "record_type": declaring_type.__qualname__, "problem": problem},
        hint="Declare campos bindáveis como atributos públicos e mutáveis de instância.",
    )


def describe_record(record_type: Any) -> List[FieldDescriptor]:
    """
    Deriva os descritores de todos os campos bindáveis de um record.

    Regras estruturais (verificadas antes de qualquer leitura de valor):
        - o tipo precisa ser uma dataclass
        - dataclass `frozen` → campos imutáveis após construção (erro)
        - campo anotado com `Final[...]` → imutável (erro)
        - atributo público anotado com `ClassVar[...]` → nível de tipo (erro)
        - campo da dataclass com nome iniciado por `_` → não público (erro)

    Args:
        record_type: tipo do record alvo.

    Returns:
        List[FieldDescriptor]: descritores na ordem natural dos campos.

    Raises:
        InvalidRecordTypeError: se o tipo não for uma dataclass ou suas
            anotações não puderem ser resolvidas.
        StructuralFieldError: se algum campo violar as regras acima.
    """
    if not is_record_type(record_type):
        raise InvalidRecordTypeError(
            message=f"Record type must be a dataclass, got: {record_type!r}",
            details={"record_type": repr(record_type)},
            hint="Decore a classe de configuração com @dataclass.",
        )

    try:
        hints = typing.get_type_hints(record_type, include_extras=True)
    except Exception as e:
        raise InvalidRecordTypeError(
            message=f"Unable to resolve type hints of {record_type.__qualname__}: {e}",
            details={"record_type": record_type.__qualname__},
        ) from e

    fields = dataclasses.fields(record_type)
    field_names = {f.name for f in fields}

    for name, hint in hints.items():
        if name in field_names or name.startswith("_"):
            continue
        if hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar:
            raise _structural_error(name, _declaring_type(record_type, name), "may not be static")

    frozen = record_type.__dataclass_params__.frozen

    descriptors: List[FieldDescriptor] = []
    for f in fields:
        declaring = _declaring_type(record_type, f.name)
        hint = hints.get(f.name, f.type)

        if f.name.startswith("_"):
            raise _structural_error(f.name, declaring, "must be public")
        if frozen:
            raise _structural_error(f.name, declaring, "may not be final")

        stripped = hint
        if typing.get_origin(stripped) is typing.Annotated:
            stripped = typing.get_args(stripped)[0]
        if stripped is typing.Final or typing.get_origin(stripped) is typing.Final:
            raise _structural_error(f.name, declaring, "may not be final")

        kind, declared, extras = classify(unwrap_type(hint))
        meta = property_meta(f)
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                kind=kind,
                declared_type=declared,
                owner_type=record_type,
                declaring_type=declaring,
                key_override=meta.name,
                required=meta.required,
                init=f.init,
                source_field=f,
                **extras,
            )
        )

    return descriptors
