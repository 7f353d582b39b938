# tests/core/binding/test_keys.py
"""
Testes de resolução de chaves (KeyResolver).

Este módulo valida a composição de namespaces ao longo da hierarquia de
classes e a precedência da chave customizada por campo.

Os testes asseguram que:
- um tipo sem namespace produz exatamente o segmento do campo
- namespaces herdados (inherit) são concatenados com o da subclasse
- `override` descarta o prefixo acumulado
- namespaces não herdados não afetam campos de subclasses
- o modo FLAT ignora todos os namespaces

Limites explícitos:
    - Não valida leitura de valores
"""

from dataclasses import dataclass
from typing import Optional

import pytest

try:
    from atlas_propbind.core.binding.descriptors import describe_record
    from atlas_propbind.core.binding.keys import KeyResolver, NamespaceMode
    from atlas_propbind.core.binding.metadata import namespace, prop
except Exception as e:  # noqa: BLE001
    describe_record = None
    KeyResolver = None
    NamespaceMode = None
    namespace = None
    prop = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

from tests.fixtures.records import (
    AdvancedConfiguration,
    CollectionConfiguration,
    LocalChild,
    OverrideConfiguration,
    SimpleConfiguration,
)


def _require_imports():
    """Garante que o resolvedor de chaves esteja disponível para os testes."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing key resolver. Implement:\n"
            "- src/atlas_propbind/core/binding/keys.py (KeyResolver, NamespaceMode)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _keys(record_type, mode=None):
    resolver = KeyResolver() if mode is None else KeyResolver(mode)
    return {d.name: resolver.key_for(d) for d in describe_record(record_type)}


def test_no_namespace_yields_bare_field_name():
    """
    Verifica que tipos sem namespace produzem chaves iguais ao uso sem namespace.

    Invariantes:
        - Prefixo vazio quando nenhuma classe da MRO declara namespace
        - Chave final é exatamente o segmento do campo
    """
    _require_imports()
    keys = _keys(SimpleConfiguration)
    assert keys["text"] == "text"
    assert keys["flags"] == "flags"


def test_custom_key_replaces_field_name():
    _require_imports()
    assert _keys(CollectionConfiguration)["simple_map"] == "map1"


def test_inherited_namespace_is_concatenated():
    """
    Verifica a composição `ns.sub.campo` para namespace herdado + namespace da subclasse.

    Decisões arquiteturais:
        - A classe que declara o campo contribui sempre com seu namespace
        - Ancestrais contribuem somente com `inherit=True`
        - Campos declarados na base usam a cadeia da base
    """
    _require_imports()
    keys = _keys(AdvancedConfiguration)
    assert keys["name"] == "app.name"
    assert keys["alias"] == "app.sub.string.name"
    assert keys["dec"] == "app.sub.dec"


def test_override_namespace_discards_base_prefix():
    _require_imports()
    keys = _keys(OverrideConfiguration)
    assert keys["port"] == "other.port"
    assert keys["name"] == "app.name"


def test_non_inherited_namespace_does_not_reach_subclass_fields():
    _require_imports()
    keys = _keys(LocalChild)
    assert keys["host"] == "local.host"
    assert keys["port"] == "port"


def test_trailing_separator_is_not_duplicated():
    _require_imports()

    @namespace("db.", inherit=True)
    @dataclass
    class Db:
        url: Optional[str] = None

    @namespace("replica")
    @dataclass
    class Replica(Db):
        lag: Optional[int] = None

    keys = _keys(Replica)
    assert keys["url"] == "db.url"
    assert keys["lag"] == "db.replica.lag"


def test_three_level_chain_with_override_in_the_middle():
    _require_imports()

    @namespace("a", inherit=True)
    @dataclass
    class A:
        x: Optional[int] = None

    @namespace("b", inherit=True, override=True)
    @dataclass
    class B(A):
        y: Optional[int] = None

    @namespace("c")
    @dataclass
    class C(B):
        z: Optional[int] = prop("zz", default=None)

    keys = _keys(C)
    assert keys == {"x": "a.x", "y": "b.y", "z": "b.c.zz"}


def test_flat_mode_ignores_namespaces():
    """
    Verifica a variante histórica (somente chave customizada por campo).
    """
    _require_imports()
    keys = _keys(AdvancedConfiguration, NamespaceMode.FLAT)
    assert keys["name"] == "name"
    assert keys["alias"] == "string.name"
    assert keys["dec"] == "dec"
