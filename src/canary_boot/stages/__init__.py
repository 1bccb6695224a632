# src/canary_boot/stages/__init__.py
"""
Stages canônicos do start-up do servidor.

- **settings**: configuração, world type, rent period, estado INIT
- **resources**: RSA, banco, dados de jogo, mapas e manutenção (colaboradores)
- **network**: serviços game / login / status
- **startup**: banner, checagem de root e `build_startup_pipeline`
"""

from .collaborators import CollaboratorRegistry, import_entrypoint
from .startup import build_startup_pipeline, startup_stages

__all__ = [
    "CollaboratorRegistry",
    "build_startup_pipeline",
    "import_entrypoint",
    "startup_stages",
]
