"""
Cliente para integração com a API REST do GLPI (apirest.php).

Centraliza toda comunicação com o GLPI, incluindo:
- Autenticação (initSession), por tenant ou com credenciais de sistema
- Busca de chamados por status, com paginação por range
- Atribuição de técnico e de categoria a um chamado
- Consulta de técnicos, categorias ITIL e entidades
- Tratamento de erros e timeouts (sem novas tentativas)
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlencode

import requests
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from ..constants import (
    TICKET_DISPLAY_FIELDS,
    TICKET_USER_TYPE_ASSIGNED,
    TECHNICIAN_PROFILE_ID,
    TECHNICIAN_SEARCH_RANGE,
    DROPDOWN_RANGE,
    SESSION_CACHE_PREFIX,
    TicketField,
    UserField,
)
from ..exceptions import GlpiApiException, GlpiAuthException, GlpiConfigurationException
from ..search import build_search_url, FieldFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionToken:
    """Token de sessão do GLPI obtido via initSession."""
    value: str
    tenant_id: Optional[int]
    issued_at: datetime


def _response_payload(response) -> Any:
    """Corpo da resposta em JSON; texto puro quando não for JSON."""
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _index_rows(rows) -> Dict:
    """
    Garante linhas indexadas pelo ID do chamado.

    Com withindexes=true o GLPI devolve um dicionário; sem resultados pode
    devolver uma lista vazia.
    """
    if isinstance(rows, dict):
        return rows
    if isinstance(rows, list):
        return {
            str(row[TicketField.ID.key]): row
            for row in rows
            if isinstance(row, dict) and row.get(TicketField.ID.key) is not None
        }
    return {}


class GlpiClient:
    """
    Cliente para comunicação com a API REST do GLPI.

    Encapsula toda lógica de autenticação, chamadas e tratamento de erros.
    Cada falha do GLPI é propagada imediatamente; nenhuma chamada é repetida.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        app_token: Optional[str] = None,
        tenant_id: Optional[int] = None
    ):
        """
        Inicializa o cliente GLPI.

        Sem argumentos, usa as credenciais de sistema definidas em settings.

        Args:
            base_url: URL da API (ex: "https://chamados.exemplo.com/apirest.php")
            user: Usuário para autenticação
            password: Senha para autenticação
            app_token: Token da aplicação
            tenant_id: Tenant dono das credenciais (None = credenciais de sistema)
        """
        self.base_url = self._normalize_base_url(
            base_url or getattr(settings, 'GLPI_API_URL', None)
        )
        self.user = user or getattr(settings, 'GLPI_API_USER', None)
        self.password = password or getattr(settings, 'GLPI_API_PASSWORD', None)
        self.app_token = app_token or getattr(settings, 'GLPI_APP_TOKEN', None)
        self.tenant_id = tenant_id
        self.auth_timeout = getattr(settings, 'GLPI_AUTH_TIMEOUT', 10)
        self.timeout = getattr(settings, 'GLPI_REQUEST_TIMEOUT', 30)
        self.page_size = getattr(settings, 'GLPI_SEARCH_PAGE_SIZE', 10000)
        self._session: Optional[SessionToken] = None

    def _normalize_base_url(self, url: Optional[str]) -> Optional[str]:
        """
        Normaliza a URL base da API GLPI.

        Args:
            url: URL bruta (com ou sem /apirest.php)

        Returns:
            Optional[str]: URL terminando em /apirest.php ou None se não configurada
        """
        if not url:
            return None

        url = url.rstrip('/')
        if url.endswith('/apirest.php'):
            return url
        return f"{url}/apirest.php"

    # =========================================================
    # SESSÃO
    # =========================================================

    def authenticate(self) -> SessionToken:
        """
        Abre uma sessão no GLPI (initSession).

        Returns:
            SessionToken: Token de sessão emitido agora

        Raises:
            GlpiConfigurationException: Se a configuração estiver incompleta
            GlpiAuthException: Se o GLPI recusar, falhar ou não devolver session_token
        """
        if not self.base_url or not self.user or not self.password:
            raise GlpiConfigurationException(
                "Configuração da API do GLPI incompleta. "
                "Verifique GLPI_API_URL, GLPI_API_USER e GLPI_API_PASSWORD "
                "ou as credenciais do tenant"
            )

        headers = {'Content-Type': 'application/json'}
        if self.app_token:
            headers['App-Token'] = self.app_token

        try:
            response = requests.post(
                f"{self.base_url}/initSession",
                json={
                    "login": self.user,
                    "password": self.password
                },
                headers=headers,
                timeout=self.auth_timeout
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            payload = _response_payload(e.response)
            logger.error(f"GLPI recusou initSession (tenant={self.tenant_id}): {payload}")
            raise GlpiAuthException(
                "Falha na autenticação com o GLPI",
                status_code=e.response.status_code if e.response is not None else None,
                payload=payload
            ) from e
        except requests.RequestException as e:
            logger.error(f"Erro de comunicação no initSession (tenant={self.tenant_id}): {str(e)}")
            raise GlpiAuthException(f"Erro ao conectar com o GLPI: {str(e)}") from e

        data = _response_payload(response)
        if not isinstance(data, dict) or not data.get('session_token'):
            raise GlpiAuthException(
                "Token de sessão não retornado pela API do GLPI",
                status_code=response.status_code,
                payload=data
            )

        self._session = SessionToken(
            value=data['session_token'],
            tenant_id=self.tenant_id,
            issued_at=timezone.now()
        )
        return self._session

    def _session_cache_key(self) -> str:
        return f"{SESSION_CACHE_PREFIX}:{self.tenant_id}"

    def get_session_token(self) -> str:
        """
        Retorna o token de sessão, autenticando se necessário.

        Com GLPI_SESSION_CACHE_TTL > 0, o token de um tenant é reaproveitado
        entre requisições até expirar no cache.

        Returns:
            str: Session token
        """
        if self._session is not None:
            return self._session.value

        ttl = getattr(settings, 'GLPI_SESSION_CACHE_TTL', 0)
        use_cache = bool(ttl) and self.tenant_id is not None

        if use_cache:
            cached = cache.get(self._session_cache_key())
            if cached is not None:
                self._session = cached
                return cached.value

        session = self.authenticate()
        if use_cache:
            cache.set(self._session_cache_key(), session, ttl)
        return session.value

    def _discard_session(self):
        """
        Esquece o token recusado pelo GLPI (ex.: ERROR_SESSION_TOKEN_INVALID).

        A próxima chamada abre uma nova sessão; a chamada que falhou não é
        repetida.
        """
        self._session = None
        if self.tenant_id is not None:
            cache.delete(self._session_cache_key())
        logger.warning(f"Token de sessão do GLPI descartado (tenant={self.tenant_id})")

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Session-Token': self.get_session_token()
        }
        if self.app_token:
            headers['App-Token'] = self.app_token
        return headers

    def _send(self, method, url: str, operation: str, **kwargs) -> Any:
        """
        Executa uma chamada autenticada (uma única tentativa).

        Args:
            method: requests.get / requests.post / requests.put
            url: URL completa
            operation: Descrição da operação para mensagens e logs

        Returns:
            Any: Corpo da resposta (JSON decodificado quando possível)

        Raises:
            GlpiApiException: Em status não-2xx, timeout ou falha de rede
        """
        headers = self._get_headers()
        try:
            response = method(url, headers=headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            payload = _response_payload(e.response)
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Erro do GLPI ao {operation} (tenant={self.tenant_id}, HTTP {status_code}): {payload}")
            if status_code == 401:
                self._discard_session()
            raise GlpiApiException(
                f"Erro do GLPI ao {operation}",
                status_code=status_code,
                payload=payload
            ) from e
        except requests.RequestException as e:
            logger.error(f"Erro de comunicação com o GLPI ao {operation} (tenant={self.tenant_id}): {str(e)}")
            raise GlpiApiException(f"Erro ao conectar com o GLPI ao {operation}: {str(e)}") from e

        return _response_payload(response)

    # =========================================================
    # CHAMADOS
    # =========================================================

    def search_tickets(
        self,
        status_value: int,
        field_filters: Optional[Iterable[FieldFilter]] = None,
        display_fields: Sequence[int] = TICKET_DISPLAY_FIELDS
    ) -> Dict:
        """
        Busca todos os chamados de um status.

        Pede páginas de GLPI_SEARCH_PAGE_SIZE linhas enquanto o totalcount
        informado pelo GLPI for maior que o já recebido.

        Args:
            status_value: Código do status
            field_filters: Critérios extras (campo, searchtype, valor)
            display_fields: Colunas pedidas via forcedisplay

        Returns:
            dict: {'data': {id: linha}, 'data_html': {id: linha}, 'totalcount': int}

        Raises:
            GlpiApiException: Se alguma página falhar
        """
        data = {}
        data_html = {}
        total_count = 0
        range_start = 0

        while True:
            url = build_search_url(
                self.base_url,
                status_value,
                field_filters=field_filters,
                display_fields=display_fields,
                range_start=range_start,
                range_end=range_start + self.page_size - 1
            )
            payload = self._send(requests.get, url, f"buscar chamados com status {status_value}")
            if not isinstance(payload, dict):
                break

            page = _index_rows(payload.get('data'))
            data.update(page)
            data_html.update(_index_rows(payload.get('data_html')))
            total_count = int(payload.get('totalcount') or 0)

            range_start += self.page_size
            if not page or range_start >= total_count:
                break

            logger.info(
                f"Status {status_value} possui {total_count} chamados; "
                f"buscando a partir da linha {range_start}"
            )

        return {'data': data, 'data_html': data_html, 'totalcount': total_count}

    def assign_ticket(self, ticket_id: int, technician_id: int) -> Any:
        """
        Atribui um técnico ao chamado (Ticket_User do tipo "atribuído para").

        Returns:
            Any: Resposta do GLPI

        Raises:
            GlpiApiException: Se o GLPI recusar ou falhar
        """
        result = self._send(
            requests.post,
            f"{self.base_url}/Ticket/{ticket_id}/Ticket_User/",
            f"atribuir o chamado {ticket_id}",
            json={
                "input": {
                    "tickets_id": ticket_id,
                    "users_id": technician_id,
                    "type": TICKET_USER_TYPE_ASSIGNED
                }
            }
        )
        logger.info(f"Chamado {ticket_id} atribuído ao técnico {technician_id} (tenant={self.tenant_id})")
        return result

    def assign_category(self, ticket_id: int, category_id: int) -> Any:
        """
        Altera a categoria ITIL do chamado.

        Returns:
            Any: Resposta do GLPI

        Raises:
            GlpiApiException: Se o GLPI recusar ou falhar
        """
        result = self._send(
            requests.put,
            f"{self.base_url}/Ticket/{ticket_id}",
            f"alterar a categoria do chamado {ticket_id}",
            json={
                "input": {
                    "id": ticket_id,
                    "itilcategories_id": category_id
                }
            }
        )
        logger.info(f"Categoria {category_id} aplicada ao chamado {ticket_id} (tenant={self.tenant_id})")
        return result

    # =========================================================
    # TÉCNICOS, CATEGORIAS E ENTIDADES
    # =========================================================

    def fetch_technicians(self) -> List[Dict]:
        """
        Busca usuários com perfil técnico.

        Returns:
            list: Dicionários com id, login, nome, sobrenome, email, entidade
        """
        display_fields = [
            UserField.LOGIN,
            UserField.ID,
            UserField.FIRST_NAME,
            UserField.LAST_NAME,
            UserField.EMAIL,
            UserField.ENTITY,
        ]
        params = [
            ('criteria[0][field]', int(UserField.PROFILE)),
            ('criteria[0][searchtype]', 'equals'),
            ('criteria[0][value]', TECHNICIAN_PROFILE_ID),
        ]
        params.extend(
            (f"forcedisplay[{index}]", int(field))
            for index, field in enumerate(display_fields)
        )
        params.extend([
            ('range', TECHNICIAN_SEARCH_RANGE),
            ('rawdata', 'true'),
        ])

        payload = self._send(
            requests.get,
            f"{self.base_url}/search/User?{urlencode(params)}",
            "consultar técnicos"
        )
        rows = payload.get('data') if isinstance(payload, dict) else None
        if isinstance(rows, dict):
            rows = list(rows.values())

        return [
            {
                'id': row.get(UserField.ID.key),
                'login': row.get(UserField.LOGIN.key),
                'nome': row.get(UserField.FIRST_NAME.key),
                'sobrenome': row.get(UserField.LAST_NAME.key),
                'email': row.get(UserField.EMAIL.key),
                'entidade': row.get(UserField.ENTITY.key),
                'is_technician': True,
            }
            for row in rows or []
            if isinstance(row, dict)
        ]

    def fetch_categories(self) -> Any:
        """Busca as categorias ITIL (competências), sem transformação."""
        return self._send(
            requests.get,
            f"{self.base_url}/ITILCategory?range={DROPDOWN_RANGE}&is_recursive=true",
            "consultar categorias"
        )

    def fetch_entities(self) -> List[Dict]:
        """
        Busca as entidades do GLPI.

        Returns:
            list: Dicionários com id, nome (completename ou name) e level
        """
        payload = self._send(
            requests.get,
            f"{self.base_url}/Entity?range={DROPDOWN_RANGE}",
            "consultar entidades"
        )
        return [
            {
                'id': entity.get('id'),
                'nome': entity.get('completename') or entity.get('name'),
                'level': entity.get('level'),
            }
            for entity in payload or []
            if isinstance(entity, dict)
        ]
