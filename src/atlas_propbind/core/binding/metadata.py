# src/atlas_propbind/core/binding/metadata.py
"""
Metadados declarativos de binding.

Este módulo define a superfície declarativa consumida pelo binder: a
marcação de campos (chave customizada e obrigatoriedade) e a marcação
de namespaces por classe.

Os metadados são anexados de forma explícita:
    - por campo, via `prop(...)`, que retorna um `dataclasses.field`
      com um `PropertyMeta` em `metadata`
    - por classe, via o decorator `@namespace(...)`, que grava um
      `Namespace` diretamente no `__dict__` da classe

Decisões arquiteturais:
    - Metadados são lidos apenas destes objetos estruturados
    - Um namespace pertence somente à classe que o declara
      (não é herdado via lookup de atributo)
    - Campos sem `prop(...)` são obrigatórios e usam o próprio nome

Invariantes:
    - `PropertyMeta` e `Namespace` são imutáveis
    - `prop()` é compatível com todos os argumentos de `dataclasses.field`

Limites explícitos:
    - Não resolve chaves (ver `keys.py`)
    - Não valida a estrutura do record (ver `descriptors.py`)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar


PROPERTY_METADATA_KEY = "atlas_propbind.property"
NAMESPACE_ATTRIBUTE = "__atlas_propbind_namespace__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class PropertyMeta:
    """Metadados de um campo: chave customizada e obrigatoriedade."""

    name: Optional[str] = None
    required: bool = True


@dataclass(frozen=True)
class Namespace:
    """
    Segmento de namespace declarado por uma classe.

    Campos:
        - value: texto literal do prefixo (ex.: "db" ou "app.db")
        - inherit: se o prefixo também se aplica a campos de subclasses
        - override: se o prefixo descarta o prefixo acumulado das superclasses
    """

    value: str
    inherit: bool = False
    override: bool = False


def prop(
    name: Optional[str] = None,
    *,
    required: bool = True,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **field_kwargs: Any,
) -> Any:
    """
    Declara um campo bindável com metadados de propriedade.

    Exemplo:
        @dataclass
        class Db:
            url: str = prop("jdbc.url")
            pool: int = prop(required=False, default=4)

    Args:
        name: chave customizada (substitui o nome do atributo no último segmento).
        required: se a ausência de texto sem default é um erro.
        default / default_factory: repassados a `dataclasses.field`.
        **field_kwargs: demais argumentos de `dataclasses.field`.

    Returns:
        O `dataclasses.Field` configurado.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[PROPERTY_METADATA_KEY] = PropertyMeta(name=name, required=required)
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **field_kwargs,
    )


def namespace(value: str, *, inherit: bool = False, override: bool = False) -> Callable[[T], T]:
    """Decorator de classe que declara o namespace das propriedades do record."""

    def decorator(cls: T) -> T:
        setattr(cls, NAMESPACE_ATTRIBUTE, Namespace(value=value, inherit=inherit, override=override))
        return cls

    return decorator


def property_meta(f: dataclasses.Field) -> PropertyMeta:
    meta = f.metadata.get(PROPERTY_METADATA_KEY)
    if isinstance(meta, PropertyMeta):
        return meta
    return PropertyMeta()


def declared_namespace(cls: type) -> Optional[Namespace]:
    """Namespace declarado pela própria classe (ignora superclasses)."""
    ns = cls.__dict__.get(NAMESPACE_ATTRIBUTE)
    if isinstance(ns, Namespace):
        return ns
    return None
