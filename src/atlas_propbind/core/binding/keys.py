# src/atlas_propbind/core/binding/keys.py
"""
Resolução de chaves de propriedades.

Este módulo calcula a chave efetiva (resolved key) de cada campo de um
record, combinando a cadeia de namespaces da hierarquia de classes com
a chave customizada do campo.

Política de resolução (modo CHAIN):
    - A MRO é percorrida da classe mais base para a mais derivada
      (excluindo `object`)
    - Classes sem namespace não alteram o prefixo acumulado
    - A classe que declara o campo sempre contribui com seu namespace;
      ancestrais contribuem apenas quando `inherit=True`
    - `override=True` descarta o prefixo acumulado e recomeça do valor
      literal do namespace; caso contrário o valor é concatenado
    - Um prefixo não vazio termina com exatamente um separador `.`
    - O último segmento é a chave customizada do campo, ou seu nome

Modo FLAT:
    Variante histórica onde apenas a chave customizada do campo é
    considerada; todo namespace é ignorado. Equivale ao modo CHAIN
    com todos os namespaces ausentes.

Invariantes:
    - Um tipo sem namespace em toda a ancestralidade produz prefixo vazio,
      e a chave final é exatamente o segmento do campo
    - A mesma chave é produzida para leitura e escrita

Limites explícitos:
    - Não lê a fonte de propriedades
    - Não valida a existência da chave
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .descriptors import FieldDescriptor
from .metadata import declared_namespace


SEPARATOR = "."


class NamespaceMode(str, Enum):
    """
    Estratégia de resolução de namespaces.

    Estratégias definidas:
        - CHAIN: cadeia completa com flags inherit/override
        - FLAT: somente a chave customizada por campo (sem namespaces)
    """
    CHAIN = "chain"
    FLAT = "flat"


@dataclass(frozen=True)
class KeyResolver:
    """Resolve prefixos de namespace e chaves efetivas de campos."""

    mode: NamespaceMode = NamespaceMode.CHAIN

    def prefix_for(self, record_type: type) -> str:
        if self.mode is NamespaceMode.FLAT:
            return ""

        prefix = ""
        for klass in reversed(record_type.__mro__):
            if klass is object:
                continue
            ns = declared_namespace(klass)
            if ns is None:
                continue

            if klass is record_type or ns.inherit:
                if ns.override:
                    prefix = ns.value
                else:
                    prefix += ns.value

            if prefix and not prefix.endswith(SEPARATOR):
                prefix += SEPARATOR

        return prefix

    def segment_for(self, descriptor: FieldDescriptor) -> str:
        if descriptor.key_override:
            return descriptor.key_override
        return descriptor.name

    def key_for(self, descriptor: FieldDescriptor) -> str:
        return self.prefix_for(descriptor.declaring_type) + self.segment_for(descriptor)
