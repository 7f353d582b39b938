# src/atlas_propbind/core/source/__init__.py
"""
Camada de fontes do Atlas PropBind.

Este pacote carrega arquivos do filesystem e os converte em stores
planos consumidos pelo binder.

Responsabilidades do pacote:
    - Leitura e escrita do formato texto `.properties`
    - Carregamento de YAML/JSON achatado em chaves pontuadas
    - Override local opcional sobre o arquivo base
    - Hash canônico do store para rastreabilidade

Limites explícitos:
    - Não realiza binding
    - Não lê variáveis de ambiente ou fontes remotas
"""
