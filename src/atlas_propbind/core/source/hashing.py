# src/atlas_propbind/core/source/hashing.py
"""
Hash canônico de stores planos.

Este módulo gera uma impressão digital determinística de um store plano
carregado, para fins de rastreabilidade (logs e comparação entre runs).

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - Algoritmo SHA-256

Limites explícitos:
    - Não carrega nem resolve fontes
    - Não persiste o hash
"""

import hashlib
import json
from typing import Mapping


def compute_store_hash(store: Mapping[str, str]) -> str:
    """
    Gera um hash determinístico de um store plano.

    Invariantes:
        - O valor retornado é uma string hexadecimal de 64 caracteres
        - Stores com o mesmo conteúdo produzem o mesmo hash,
          independentemente da ordem de inserção
        - Nenhuma mutação ocorre sobre o input

    Args:
        store (Mapping[str, str]): Store plano (chave → texto).

    Returns:
        str: Hash SHA-256 hexadecimal.
    """
    canonical = json.dumps(
        dict(store),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
