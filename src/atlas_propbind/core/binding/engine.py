# src/atlas_propbind/core/binding/engine.py
"""
Binder canônico do Atlas PropBind.

Este módulo define o `PropertyBinder`, o orquestrador responsável por
ligar stores planos (chave → texto) a records tipados e pelo caminho
inverso.

Fluxo de leitura:
    store (ou caminho) → PropertyBinder.read → KeyResolver (por campo)
    → CodecRegistry (por valor) → record preenchido

Fluxo de escrita:
    record → PropertyBinder.write → RecordEncoder → store plano

Responsabilidades do módulo:
    - Possuir a instância mutável do registry de codecs
    - Expor o registro de codecs customizados
    - Delegar leitura e escrita a decoder e encoder
    - Oferecer uma instância padrão de conveniência

Decisões arquiteturais:
    - O registry pertence à instância do binder (não é global)
    - A instância padrão (`get_default_binder`) é apenas um wrapper de
      conveniência; chamadas concorrentes de `register_codec` a partir de
      várias threads competem sem sincronização
    - Leitura e escrita são síncronas e sem estado além do registry

Invariantes:
    - O binder nunca guarda referência ao record após uma chamada
    - Leitura e escrita usam o mesmo resolvedor de chaves

Limites explícitos:
    - Não implementa hot-reload nem reconfiguração concorrente
    - Não lê variáveis de ambiente ou fontes remotas
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Type, TypeVar, Union

from atlas_propbind.core.source.loader import load_store
from atlas_propbind.core.source.properties import dump_properties

from .codecs import CodecRegistry, Decoder, Encoder
from .decoder import RecordDecoder
from .descriptors import describe_record
from .encoder import RecordEncoder
from .keys import KeyResolver, NamespaceMode


logger = logging.getLogger(__name__)

R = TypeVar("R")

Source = Union[Mapping[str, str], str, "os.PathLike[str]"]


@dataclass(frozen=True)
class BindingOptions:
    """
    Opções de configuração do binder.

    Campos:
        - namespace_mode: estratégia de resolução de namespaces
        - encoding: codificação usada ao ler/escrever arquivos
    """

    namespace_mode: NamespaceMode = NamespaceMode.CHAIN
    encoding: str = "utf-8"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BindingOptions":
        """Constrói opções a partir de um mapping plano (ex.: store carregado)."""
        mode = data.get("namespace_mode", NamespaceMode.CHAIN)
        if not isinstance(mode, NamespaceMode):
            mode = NamespaceMode(str(mode).lower())
        return cls(namespace_mode=mode, encoding=str(data.get("encoding", "utf-8")))


class PropertyBinder:
    """
    Orquestrador de binding entre stores planos e records tipados.

    Exemplo:
        binder = PropertyBinder()
        binder.register_codec(Decimal, Decimal, str)
        cfg = binder.read("~/app.properties", AppConfig)
        store = binder.to_store(cfg)
    """

    def __init__(self, registry: Optional[CodecRegistry] = None, *, options: Optional[BindingOptions] = None) -> None:
        self.registry = registry if registry is not None else CodecRegistry.with_defaults()
        self.options = options if options is not None else BindingOptions()
        self.resolver = KeyResolver(self.options.namespace_mode)

    # -----------------------------
    # Registro de codecs
    # -----------------------------
    def register_codec(self, tp: Any, decode: Decoder, encode: Encoder = str) -> None:
        self.registry.register(tp, decode, encode)

    def register_array(self, element_type: Any) -> None:
        self.registry.register_array(element_type)

    # -----------------------------
    # Leitura
    # -----------------------------
    def read(self, source: Source, record_type: Type[R]) -> R:
        """
        Popula uma nova instância de `record_type` a partir de `source`.

        Args:
            source: store plano (mapping) ou caminho para um arquivo.
            record_type: dataclass alvo.

        Returns:
            Nova instância preenchida (nunca `None`).

        Raises:
            SourceUnavailableError / SourceParseError: falha ao carregar o arquivo.
            StructuralFieldError: record com campos não bindáveis.
            MissingRequiredPropertyError: propriedade obrigatória ausente.
            UnsupportedTypeError: tipo de campo sem codec.
            ValueConversionError: texto presente não convertível.
        """
        if isinstance(source, (str, os.PathLike)):
            store: Mapping[str, str] = load_store(source, encoding=self.options.encoding)
        else:
            store = source

        decoder = RecordDecoder(self.registry, self.resolver)
        return decoder.decode(store, record_type)

    # -----------------------------
    # Escrita
    # -----------------------------
    def write(self, store: MutableMapping[str, str], instance: Any) -> MutableMapping[str, str]:
        """Escreve cada campo não-`None` de `instance` em `store` e o retorna."""
        encoder = RecordEncoder(self.registry, self.resolver)
        return encoder.encode_into(store, instance)

    def to_store(self, instance: Any) -> Dict[str, str]:
        store: Dict[str, str] = {}
        self.write(store, instance)
        return store

    def save(self, instance: Any, path: Union[str, "os.PathLike[str]"], *, header: Optional[str] = None) -> Path:
        """Gera um arquivo `.properties` a partir de `instance`."""
        target = Path(os.fspath(path)).expanduser()
        target.write_text(dump_properties(self.to_store(instance), header=header), encoding=self.options.encoding)
        logger.info("Properties written to: %s", target)
        return target

    # -----------------------------
    # Introspecção
    # -----------------------------
    def key_for(self, record_type: Any, field_name: str) -> str:
        for d in describe_record(record_type):
            if d.name == field_name:
                return self.resolver.key_for(d)
        raise KeyError(f"{record_type.__qualname__} has no bindable field {field_name!r}")


_default_binder: Optional[PropertyBinder] = None


def get_default_binder() -> PropertyBinder:
    """
    Retorna a instância padrão (criada sob demanda) do binder.

    A instância é compartilhada pelo processo inteiro e não possui
    sincronização: registrar codecs a partir de várias threads ao mesmo
    tempo é uma condição de corrida. Prefira instâncias próprias de
    `PropertyBinder` quando houver codecs customizados.
    """
    global _default_binder
    if _default_binder is None:
        _default_binder = PropertyBinder()
    return _default_binder
