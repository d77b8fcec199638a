"""App — orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos e erros de domínio
- use_cases/: processamento de webhooks e varredura do dedupe
- services/: registro de providers, verificação de webhooks, variáveis
- infra/: implementações concretas de IO (Redis, HTTP, YAML)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; utils apoia.
"""
