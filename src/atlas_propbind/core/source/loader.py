# src/atlas_propbind/core/source/loader.py
"""
Loader canônico de stores planos.

Este módulo é responsável por carregar um arquivo do filesystem e
produzir o store plano (`Dict[str, str]`) consumido pelo binder.

O store é resolvido a partir de:
    - um arquivo base (obrigatório)
    - um arquivo local de overrides (opcional)

Formatos suportados (v1), inferidos pela extensão:
    - `.yaml` / `.yml` → PyYAML (`safe_load`), achatado em chaves pontuadas
    - `.json`          → JSON, achatado em chaves pontuadas
    - qualquer outro   → texto `.properties`

Política de achatamento (YAML/JSON):
    - mapping → `pai.filho`
    - lista de escalares → valores unidos por `,`
    - lista com mappings → itens indexados `pai.0`, `pai.1`, ...
    - booleanos → `true` / `false`
    - `None` → chave omitida

Decisões arquiteturais:
    - `~` no início do caminho é expandido para o diretório do usuário
    - Arquivo inexistente, diretório ou ilegível é falha fatal,
      levantada antes de qualquer binding
    - O override local substitui chaves individuais do arquivo base

Invariantes:
    - O retorno é sempre um dicionário de texto para texto
    - O arquivo base nunca é ignorado

Limites explícitos:
    - Não realiza binding
    - Não valida semântica das propriedades
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from atlas_propbind.core.exceptions import SourceParseError, SourceUnavailableError

from .hashing import compute_store_hash
from .properties import parse_properties


logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _flatten(data: Any, prefix: str, out: Dict[str, str]) -> None:
    if data is None:
        return

    if isinstance(data, dict):
        for key, value in data.items():
            child = f"{prefix}.{key}" if prefix else str(key)
            _flatten(value, child, out)
        return

    if isinstance(data, (list, tuple)):
        if any(isinstance(item, (dict, list, tuple)) for item in data):
            for index, item in enumerate(data):
                _flatten(item, f"{prefix}.{index}", out)
        else:
            out[prefix] = ",".join(_scalar_text(item) for item in data if item is not None)
        return

    out[prefix] = _scalar_text(data)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_mapping(data: Any) -> Dict[str, str]:
    """
    Achata um documento YAML/JSON em um store plano com chaves pontuadas.

    Raises:
        SourceParseError: Se a raiz não for um mapping.
    """
    out: Dict[str, str] = {}
    if data is None:
        return out
    if not isinstance(data, dict):
        raise SourceParseError(
            message=f"Config root must be a mapping, got: {type(data).__name__}",
            details={"root_type": type(data).__name__},
        )
    _flatten(data, "", out)
    return out


def _resolve(path: PathLike) -> Path:
    return Path(os.fspath(path)).expanduser()


def _load_file(path: Path, encoding: str) -> Dict[str, str]:
    """
    Carrega um único arquivo e o converte em store plano.

    Raises:
        SourceUnavailableError: Se o arquivo não existir, for um diretório
            ou não puder ser lido.
        SourceParseError: Se o conteúdo não puder ser interpretado.
    """
    try:
        logger.info("Loading properties from: %s", path.resolve())
    except OSError:
        logger.info("Loading properties from: %s", path)

    if not path.is_file():
        if path.is_dir():
            raise SourceUnavailableError(
                message="Properties file is a directory",
                details={"path": str(path)},
            )
        raise SourceUnavailableError(
            message="Properties file does not exist",
            details={"path": str(path)},
            hint="Verifique o caminho informado (\"~\" é expandido para o diretório do usuário).",
        )

    try:
        raw = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(
            message="Unable to read properties file",
            details={"path": str(path), "cause": f"{type(e).__name__}: {e}"},
        ) from e

    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            return flatten_mapping(yaml.safe_load(raw))
        if suffix == ".json":
            return flatten_mapping(json.loads(raw))
        return parse_properties(raw)
    except SourceParseError:
        raise
    except Exception as e:
        raise SourceParseError(
            message=str(e) or "failed to parse properties source",
            details={"path": str(path), "format": suffix or ".properties"},
        ) from e


def load_store(
    path: PathLike,
    *,
    local_path: Optional[PathLike] = None,
    encoding: str = "utf-8",
) -> Dict[str, str]:
    """
    Carrega e resolve o store plano efetivo.

    Política de resolução:
        - O arquivo base é obrigatório
        - O arquivo local é opcional; quando existe, suas chaves
          prevalecem sobre as do arquivo base

    Args:
        path: Caminho para o arquivo base.
        local_path: Caminho opcional para overrides locais.
        encoding: Codificação dos arquivos texto.

    Returns:
        Dict[str, str]: Store plano resolvido.

    Raises:
        SourceUnavailableError: Se o arquivo base estiver indisponível.
        SourceParseError: Se algum arquivo não puder ser interpretado.
    """
    store = _load_file(_resolve(path), encoding)

    if local_path is not None:
        local_file = _resolve(local_path)
        if local_file.exists():
            store.update(_load_file(local_file, encoding))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("store loaded: %d keys, sha256=%s", len(store), compute_store_hash(store))
    return store
