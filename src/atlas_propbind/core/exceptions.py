"""
Atlas PropBind — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do Atlas PropBind.

Objetivo:
- Permitir que o binder (leitura e escrita) levante exceções semânticas tipadas
- Facilitar o mapeamento determinístico para BindingErrorPayload
- Evitar ValueError/RuntimeError genéricos em falhas de configuração

Regras:
- Todas as falhas são erros de programação ou de configuração (não transitórias)
- Nenhuma exceção é re-tentada internamente
- Exceções carregam apenas dados estruturados (serializáveis) em `details`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class BindingException(Exception):
    """Base class para exceções do Atlas PropBind.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    - Não congelar a instância: o interpretador atribui `__traceback__`
      e `__notes__` ao propagar a exceção
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Estrutura do record
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class StructuralFieldError(BindingException):
    """Campo do record viola as regras de visibilidade/mutabilidade."""


@dataclass(eq=False)
class InvalidRecordTypeError(StructuralFieldError):
    """O tipo alvo não é um record bindável (dataclass)."""


# ---------------------------------------------------------------------------
# Leitura (decode)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class MissingRequiredPropertyError(BindingException):
    """Campo obrigatório sem texto na fonte e sem default pré-existente."""


@dataclass(eq=False)
class UnsupportedTypeError(BindingException):
    """Nenhum codec registrado para o tipo declarado do campo."""


@dataclass(eq=False)
class ValueConversionError(BindingException):
    """A função de conversão do codec falhou para um texto presente."""


@dataclass(eq=False)
class MalformedKeyError(BindingException):
    """Chave de map sem segmento após o prefixo (ex.: `map.` ou `map..a`)."""


# ---------------------------------------------------------------------------
# Escrita (encode)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class MissingKeyCodecError(BindingException):
    """Tipo da chave de um map não possui codec escalar registrado."""


# ---------------------------------------------------------------------------
# Fonte externa (loader)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class SourceUnavailableError(BindingException):
    """Arquivo de propriedades inexistente, diretório ou ilegível."""


@dataclass(eq=False)
class SourceParseError(BindingException):
    """Conteúdo da fonte não pôde ser interpretado como store plano."""
