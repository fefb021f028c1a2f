"""
Exceções customizadas para o projeto.

Centraliza exceções relacionadas à API do GLPI e às regras de automação.
"""
from typing import Any, Optional


class GlpiApiException(Exception):
    """
    Exceção para erros na API do GLPI (busca e escrita).
    
    Attributes:
        message: Mensagem descritiva do erro
        status_code: Status HTTP devolvido pelo GLPI (None em falhas de rede)
        payload: Corpo de erro devolvido pelo GLPI, repassado para diagnóstico
    """
    
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class GlpiAuthException(GlpiApiException):
    """
    Exceção quando a abertura de sessão (initSession) falha
    ou não devolve session_token.
    """


class AutomationDisabledException(Exception):
    """
    Exceção quando uma automação está desabilitada para o tenant.
    
    Attributes:
        message: Mensagem amigável do erro
    """
    
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class GlpiConfigurationException(Exception):
    """
    Exceção quando as credenciais do GLPI (de sistema ou do tenant)
    não estão configuradas.

    Attributes:
        message: Mensagem descritiva do erro
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
