# tests/core/binding/test_descriptors.py
"""
Testes de derivação de descritores e regras estruturais.

Este módulo valida `describe_record`, responsável por enumerar os campos
bindáveis de uma dataclass e rejeitar estruturas inválidas antes de
qualquer processamento de valores.

Os testes asseguram que:
- a ordem dos campos segue a ordem natural da dataclass
- o tipo declarado é classificado corretamente (escalar, array, lista, set, map)
- `Optional[...]` é desembrulhado
- campos estáticos, finais ou não públicos geram StructuralFieldError
- tipos que não são dataclass geram InvalidRecordTypeError

Limites explícitos:
    - Não valida leitura de valores
    - Não valida resolução de chaves
"""

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Final, FrozenSet, List, Optional, Sequence, Set, Tuple

import pytest

try:
    from atlas_propbind.core.binding.descriptors import FieldKind, describe_record
    from atlas_propbind.core.binding.metadata import prop
    from atlas_propbind.core.exceptions import InvalidRecordTypeError, StructuralFieldError
except Exception as e:  # noqa: BLE001
    FieldKind = None
    describe_record = None
    prop = None
    InvalidRecordTypeError = None
    StructuralFieldError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

from tests.fixtures.records import AdvancedConfiguration, BaseConfiguration, CollectionConfiguration


def _require_imports():
    """
    Garante que os descritores e as exceções estruturais estejam disponíveis.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing descriptors module. Implement:\n"
            "- src/atlas_propbind/core/binding/descriptors.py (FieldKind, describe_record)\n"
            "- src/atlas_propbind/core/exceptions.py (StructuralFieldError, InvalidRecordTypeError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_fields_follow_dataclass_order_with_base_first():
    """
    Verifica que os campos herdados aparecem antes dos campos da subclasse.

    Invariantes:
        - A ordem dos descritores é a ordem de `dataclasses.fields`
        - Cada descritor conhece a classe que declara o campo
    """
    _require_imports()
    descriptors = describe_record(AdvancedConfiguration)
    assert [d.name for d in descriptors] == ["name", "alias", "dec", "c", "retries"]
    assert descriptors[0].declaring_type is BaseConfiguration
    assert descriptors[1].declaring_type is AdvancedConfiguration
    assert all(d.owner_type is AdvancedConfiguration for d in descriptors)


def test_prop_metadata_is_exposed_on_descriptor():
    _require_imports()
    by_name = {d.name: d for d in describe_record(AdvancedConfiguration)}
    assert by_name["alias"].key_override == "string.name"
    assert by_name["alias"].required is True
    assert by_name["retries"].required is False
    assert by_name["dec"].key_override is None


def test_kinds_are_classified():
    """
    Verifica a classificação de containers e o desembrulho de Optional.
    """
    _require_imports()

    @dataclass
    class Kinds:
        a: Optional[int] = None
        b: Tuple[int, ...] = ()
        c: List[str] = field(default_factory=list)
        d: Set[int] = field(default_factory=set)
        e: FrozenSet[str] = frozenset()
        f: Dict[int, float] = field(default_factory=dict)
        g: Sequence[float] = ()
        h: list = field(default_factory=list)

    by_name = {d.name: d for d in describe_record(Kinds)}

    assert by_name["a"].kind is FieldKind.SCALAR
    assert by_name["a"].declared_type is int

    assert by_name["b"].kind is FieldKind.ARRAY
    assert by_name["b"].declared_type == tuple[int, ...]

    assert by_name["c"].kind is FieldKind.LIST
    assert by_name["c"].element_type is str

    assert by_name["d"].kind is FieldKind.SET
    assert by_name["d"].container is set

    assert by_name["e"].kind is FieldKind.SET
    assert by_name["e"].container is frozenset

    assert by_name["f"].kind is FieldKind.MAP
    assert (by_name["f"].key_type, by_name["f"].value_type) == (int, float)

    assert by_name["g"].kind is FieldKind.LIST
    assert by_name["g"].element_type is float

    assert by_name["h"].kind is FieldKind.LIST
    assert by_name["h"].element_type is str


def test_initial_value_is_recomputed_from_factory():
    _require_imports()
    d = {x.name: x for x in describe_record(CollectionConfiguration)}["default_list"]
    first = d.initial_value()
    second = d.initial_value()
    assert first == ["a", "b"]
    assert first is not second


def test_non_dataclass_is_rejected():
    _require_imports()

    class NotARecord:
        value: int = 1

    with pytest.raises(InvalidRecordTypeError):
        describe_record(NotARecord)


def test_static_field_is_rejected():
    """
    Verifica que atributos públicos de nível de tipo (ClassVar) são erro estrutural.
    """
    _require_imports()

    @dataclass
    class WithStatic:
        LIMIT: ClassVar[int] = 10
        value: Optional[int] = None

    with pytest.raises(StructuralFieldError) as excinfo:
        describe_record(WithStatic)
    assert excinfo.value.details["field"] == "LIMIT"
    assert excinfo.value.details["problem"] == "may not be static"


def test_private_static_field_is_ignored():
    _require_imports()

    @dataclass
    class WithPrivateStatic:
        _cache: ClassVar[dict] = {}
        value: Optional[int] = None

    assert [d.name for d in describe_record(WithPrivateStatic)] == ["value"]


def test_final_field_is_rejected():
    _require_imports()

    @dataclass
    class WithFinal:
        value: Final[int] = 1

    with pytest.raises(StructuralFieldError) as excinfo:
        describe_record(WithFinal)
    assert excinfo.value.details["problem"] == "may not be final"


def test_frozen_record_is_rejected():
    _require_imports()

    @dataclass(frozen=True)
    class Frozen:
        value: Optional[int] = None

    with pytest.raises(StructuralFieldError):
        describe_record(Frozen)


def test_private_field_is_rejected():
    _require_imports()

    @dataclass
    class WithPrivate:
        _secret: Optional[str] = None

    with pytest.raises(StructuralFieldError) as excinfo:
        describe_record(WithPrivate)
    assert excinfo.value.details["problem"] == "must be public"
