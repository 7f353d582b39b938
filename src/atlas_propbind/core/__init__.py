# src/atlas_propbind/core/__init__.py
"""
Core do Atlas PropBind.

Este pacote contém a implementação canônica do binding entre stores
planos de propriedades e records tipados.

Componentes principais:
    - binding → descritores de campo, resolução de chaves, registry de
                codecs, decoder, encoder e o binder orquestrador
    - source  → carregamento de arquivos para stores planos
    - errors / exceptions → exceções tipadas e payload canônico

Princípios fundamentais:
    - Nenhuma decisão silenciosa: toda falha de binding é tipada
    - Leitura e escrita são simétricas (mesma derivação de chaves)
    - Nenhum estado global obrigatório

Este pacote existe como a fonte de verdade operacional do Atlas PropBind.
"""
