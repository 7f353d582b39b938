"""
Atlas PropBind — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do Atlas PropBind.
Erros de binding fazem parte do contrato operacional da biblioteca e
devem ser:

- explícitos
- serializáveis
- acionáveis

Cada exceção tipada (`atlas_propbind.core.exceptions`) possui exatamente
um código estável neste catálogo.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import (
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


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BindingErrorPayload:
    """
    Payload canônico de erro do Atlas PropBind.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida a quem mantém o arquivo de propriedades ou o record
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Estrutura do record
BINDING_STRUCTURAL_FIELD = "BINDING_STRUCTURAL_FIELD"
BINDING_INVALID_RECORD_TYPE = "BINDING_INVALID_RECORD_TYPE"

# Leitura
BINDING_MISSING_REQUIRED_PROPERTY = "BINDING_MISSING_REQUIRED_PROPERTY"
BINDING_UNSUPPORTED_TYPE = "BINDING_UNSUPPORTED_TYPE"
BINDING_VALUE_CONVERSION = "BINDING_VALUE_CONVERSION"
BINDING_MALFORMED_KEY = "BINDING_MALFORMED_KEY"

# Escrita
BINDING_MISSING_KEY_CODEC = "BINDING_MISSING_KEY_CODEC"

# Fonte externa
SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
SOURCE_PARSE_ERROR = "SOURCE_PARSE_ERROR"

BINDING_ERROR = "BINDING_ERROR"

# Ordem importa: subclasses antes das bases.
_CODES = (
    (InvalidRecordTypeError, BINDING_INVALID_RECORD_TYPE),
    (StructuralFieldError, BINDING_STRUCTURAL_FIELD),
    (MissingRequiredPropertyError, BINDING_MISSING_REQUIRED_PROPERTY),
    (UnsupportedTypeError, BINDING_UNSUPPORTED_TYPE),
    (ValueConversionError, BINDING_VALUE_CONVERSION),
    (MalformedKeyError, BINDING_MALFORMED_KEY),
    (MissingKeyCodecError, BINDING_MISSING_KEY_CODEC),
    (SourceUnavailableError, SOURCE_UNAVAILABLE),
    (SourceParseError, SOURCE_PARSE_ERROR),
)


def error_code(exc: BindingException) -> str:
    """Retorna o código estável associado à exceção tipada."""
    for exc_type, code in _CODES:
        if isinstance(exc, exc_type):
            return code
    return BINDING_ERROR


def to_error_payload(exc: BindingException) -> BindingErrorPayload:
    """
    Converte uma exceção tipada do binder em payload canônico.

    O mapeamento é determinístico: a mesma exceção sempre produz o
    mesmo `type`, e `details` é copiado (nunca compartilhado).

    Args:
        exc (BindingException): Exceção levantada pelo binder ou pelo loader.

    Returns:
        BindingErrorPayload: Representação serializável do erro.
    """
    return BindingErrorPayload(
        type=error_code(exc),
        message=exc.message,
        details=dict(exc.details),
        hint=exc.hint,
    )
