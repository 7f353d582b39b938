# src/atlas_propbind/__init__.py
"""
Atlas PropBind — binding declarativo de propriedades para records tipados.

Este pacote raiz define o namespace público do Atlas PropBind, uma
biblioteca que liga arquivos de propriedades planos (`chave=valor`) a
dataclasses tipadas, e realiza o caminho inverso (record → propriedades)
para testes de round-trip e geração de configuração.

Arquitetura em alto nível:
    - core.binding → descritores, resolução de chaves, codecs, leitura e escrita
    - core.source  → carregamento de arquivos (.properties, YAML, JSON)
    - core.errors  → payload canônico e catálogo de códigos de erro

Limites explícitos:
    - Não suporta grafos de objetos arbitrários (apenas um nível de map-de-records)
    - Não valida schema além de tipo e obrigatoriedade
    - Não lê variáveis de ambiente nem fontes remotas
"""

from .core.binding.codecs import Codec, CodecRegistry
from .core.binding.engine import BindingOptions, PropertyBinder, get_default_binder
from .core.binding.keys import KeyResolver, NamespaceMode
from .core.binding.metadata import Namespace, PropertyMeta, namespace, prop
from .core.exceptions import (
    BindingException,
    InvalidRecordTypeError,
    MalformedKeyError,
    MissingKeyCodecError,
    MissingRequiredPropertyError,
    SourceParseError,
    SourceUnavailableError,
    StructuralFieldError,
    UnsupportedTypeError,
    ValueConversionError,
)
from .core.source.loader import load_store
from .core.source.properties import dump_properties, parse_properties

__all__ = [
    "BindingException",
    "BindingOptions",
    "Codec",
    "CodecRegistry",
    "InvalidRecordTypeError",
    "KeyResolver",
    "MalformedKeyError",
    "MissingKeyCodecError",
    "MissingRequiredPropertyError",
    "Namespace",
    "NamespaceMode",
    "PropertyBinder",
    "PropertyMeta",
    "SourceParseError",
    "SourceUnavailableError",
    "StructuralFieldError",
    "UnsupportedTypeError",
    "ValueConversionError",
    "dump_properties",
    "get_default_binder",
    "load_store",
    "namespace",
    "parse_properties",
    "prop",
]
