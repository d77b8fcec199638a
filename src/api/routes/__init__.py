"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhooks, providers, variáveis, health)
- Validação inicial de request (headers, query params, corpo)
- Delegação para services/use_cases
- Mapeamento de erros de domínio para status HTTP (errors.py)

Estrutura:
- routes/webhooks/: handshake e recebimento de eventos por tenant
- routes/providers/: catálogo e configurações por tenant
- routes/variables/: resolução e preview de templates
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.errors import install_error_handlers
from api.routes.router import create_api_router

__all__ = ["create_api_router", "install_error_handlers"]
