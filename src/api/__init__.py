"""API — camada de borda.

Responsabilidades:
- Receber webhooks de providers externos e validar assinaturas
- Normalizar payloads para modelos internos
- Expor rotas de configuração de providers e de variáveis

Subpastas:
- connectors/: protocolo de borda por canal (handshake, assinatura, identidade)
- normalizers/: conversão de payloads externos → modelos internos
- routes/: endpoints HTTP (webhooks, providers, variables, health)

NÃO PODE conter: regras de dedupe, acesso a stores, orquestração de use cases.
"""
