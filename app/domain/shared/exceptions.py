"""Exceções de domínio/aplicação mapeadas para HTTP pelos exception handlers."""

from __future__ import annotations


class NotFoundError(Exception):
    """Recurso não encontrado (ou não visível para o usuário)."""
    def __init__(self, resource: str = "Recurso", resource_id: int | str = ""):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} não encontrado")


class BadRequestError(Exception):
    """Requisição inválida de domínio."""
    pass


class PayloadTooLargeError(Exception):
    """Arquivo enviado excede o tamanho máximo permitido."""
    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"Arquivo excede o limite de {max_bytes} bytes")
