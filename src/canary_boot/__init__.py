# src/canary_boot/__init__.py
"""
Canary Boot — orquestrador concorrente de bootstrap do servidor Canary.

Este pacote raiz define o namespace público do Canary Boot, responsável
por subir o processo do servidor de forma segura: iniciar os workers,
executar o pipeline de inicialização em background, decidir se o processo
está apto a servir tráfego e desligar tudo em ordem definida.

Arquitetura em alto nível:
    - core.config    → carregamento, merge e hashing de configuração
    - core.workers   → workers nomeados (dispatcher, scheduler, database tasks)
    - core.services  → listeners de rede registrados no ServiceManager
    - core.pipeline  → Stages, resultado de Stage e InitializationPipeline
    - core           → handshake, escalonamento de erro fatal e coordenador
    - stages         → Stages canônicos do start-up do servidor

Limites explícitos:
    - Não processa requisições de jogo
    - Não implementa protocolos de rede nem formatos de persistência
    - Loaders externos (banco, scripts, mapas) são colaboradores opacos
"""

__version__ = "0.1.0"

SERVER_NAME = "Canary"
SERVER_DEVELOPERS = "OpenTibiaBR Organization"

__all__ = ["__version__", "SERVER_NAME", "SERVER_DEVELOPERS"]
