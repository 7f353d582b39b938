# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas PropBind.

Este módulo define fixtures reutilizáveis que fornecem:
- binders isolados (registry próprio por teste)
- stores planos mínimos e determinísticos
- caminhos para arquivos de propriedades de exemplo

Decisões arquiteturais:
    - Cada teste recebe um `PropertyBinder` novo; nenhum codec
      customizado vaza entre testes
    - Stores são fornecidos como dicionários para evitar I/O
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture altera a instância padrão do binder
    - Dados retornados são determinísticos e isolados

Limites explícitos:
    - Não substituir testes de integração com filesystem
    - Não conter lógica condicional complexa

Este módulo existe como infraestrutura de teste e não
como validação funcional da biblioteca.
"""

from pathlib import Path

import pytest


PROPERTIES_DIR = Path(__file__).parent / "fixtures" / "properties"


@pytest.fixture
def properties_dir() -> Path:
    """
    Diretório com arquivos `.properties`/YAML de exemplo.

    Returns:
        Path: `tests/fixtures/properties`.
    """
    return PROPERTIES_DIR


@pytest.fixture
def binder():
    """
    Fixture que fornece um `PropertyBinder` isolado com codecs default.

    Decisões arquiteturais:
        - Um registry novo por teste (nunca a instância padrão)
        - Namespaces em modo CHAIN (default)

    Returns:
        PropertyBinder: binder pronto para leitura e escrita.
    """
    from atlas_propbind.core.binding.engine import PropertyBinder

    return PropertyBinder()


@pytest.fixture
def decimal_binder(binder):
    """Binder com codec adicional para `decimal.Decimal`."""
    from decimal import Decimal

    binder.register_codec(Decimal, Decimal, str)
    return binder


@pytest.fixture
def simple_store() -> dict:
    """
    Store plano equivalente a `simple.properties`.

    Cobre todos os tipos escalares default e seus arrays.

    Returns:
        dict: chave → texto.
    """
    return {
        "text": "abc",
        "integer": "1",
        "long": "1",
        "single": "1.23",
        "double": "1.23",
        "flag": "true",
        "texts": "a,b,c",
        "integers": "1,2,3",
        "longs": "1,2,3",
        "singles": "1.23,2.34,3.45",
        "doubles": "1.23,2.34,3.45",
        "flags": "true,false,true",
    }
