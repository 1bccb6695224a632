# src/canary_boot/core/__init__.py
"""
Core do Canary Boot.

Este pacote reúne a implementação canônica da orquestração de bootstrap,
independente dos Stages concretos do servidor.

Componentes principais:
    - config       → resolução de configuração (merge, validação estrutural, hashing)
    - workers      → ciclo de vida uniforme start/request_shutdown/join
    - services     → registro de listeners e laço de accept
    - pipeline     → Stages obrigatórios e best-effort executados em ordem
    - handshake    → sinal único entre o pipeline e a thread principal
    - escalation   → único caminho de erro fatal
    - coordinator  → máquina de estados do bootstrap

Princípios fundamentais:
    - Nenhum singleton global: todo estado vive no BootContext
    - A thread principal bloqueia exatamente uma vez, no handshake
    - Toda terminação do processo é decidida no coordenador
"""
