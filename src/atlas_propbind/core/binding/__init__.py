# src/atlas_propbind/core/binding/__init__.py
"""
Camada de binding do Atlas PropBind.

Este pacote contém as estruturas responsáveis por ligar um store plano
(chave → texto) a um record tipado e pelo caminho inverso.

Responsabilidades do pacote:
    - Derivação de descritores de campo a partir de dataclasses
    - Resolução de chaves com cadeias de namespace (inherit/override)
    - Registry de codecs texto ↔ valor
    - Leitura (decoder) e escrita (encoder) simétricas

Invariantes:
    - Descritores são derivados a cada chamada (sem cache)
    - Uma violação estrutural aborta o bind antes de qualquer valor
    - Nenhum record parcialmente preenchido é retornado como válido

Limites explícitos:
    - Não abre arquivos (ver `core.source`)
    - Não oferece sincronização entre threads
"""
