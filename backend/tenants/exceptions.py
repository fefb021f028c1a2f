"""
Exceções customizadas para o app tenants.
"""


class TenantNotFoundException(Exception):
    """
    Exceção quando o tenant não existe ou está inativo.
    
    Attributes:
        tenant_id: ID do tenant procurado
        message: Mensagem descritiva do erro
    """
    
    def __init__(self, tenant_id):
        self.tenant_id = tenant_id
        self.message = "Tenant não encontrado"
        super().__init__(f"{self.message}: {tenant_id}")
