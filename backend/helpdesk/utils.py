"""
Utilitários para limpeza do conteúdo HTML devolvido pelo GLPI.

Este módulo contém funções auxiliares para:
- Converter campos HTML (data_html) em texto puro
- Extrair nome, e-mail e telefone dos blocos de requerente/técnico
"""
import re
from typing import Dict, Optional

STYLE_BLOCK_RE = re.compile(r'<style[^>]*>[\s\S]*?</style>', re.IGNORECASE)
SCRIPT_BLOCK_RE = re.compile(r'<script[^>]*>[\s\S]*?</script>', re.IGNORECASE)
TAG_RE = re.compile(r'</?[a-zA-Z!][^>]*>')
NUMERIC_ENTITY_RE = re.compile(r'&#(\d+);')
WHITESPACE_RE = re.compile(r'\s+')
SURROGATE_RE = re.compile('[\ud800-\udfff]')

# Ordem importa: &amp; por último para não decodificar duas vezes na mesma passada
NAMED_ENTITIES = [
    ('&nbsp;', ' '),
    ('&quot;', '"'),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&amp;', '&'),
]

LEADING_TEXT_RE = re.compile(r'^([^<]+)')
FIRST_TEXT_NODE_RE = re.compile(r'>\s*([^<\s][^<]*)')
EMAIL_RE = re.compile(r'mailto:([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})')
PHONE_RE = re.compile(r'tel:([^"\'>\s]+)')


def _decode_numeric_entity(match) -> str:
    try:
        return chr(int(match.group(1)))
    except (ValueError, OverflowError):
        return ''


def _join_surrogates(text: str) -> str:
    """
    Junta pares UTF-16 (&#55357;&#56832;) em um único caractere.

    Metades soltas não podem ser codificadas em UTF-8 e são descartadas.
    """
    if not SURROGATE_RE.search(text):
        return text
    text = text.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'surrogatepass')
    return SURROGATE_RE.sub('', text)


def _sanitize_once(text: str) -> str:
    text = STYLE_BLOCK_RE.sub('', text)
    text = SCRIPT_BLOCK_RE.sub('', text)
    text = TAG_RE.sub('', text)
    for entity, char in NAMED_ENTITIES:
        text = text.replace(entity, char)
    text = NUMERIC_ENTITY_RE.sub(_decode_numeric_entity, text)
    text = _join_surrogates(text)
    return WHITESPACE_RE.sub(' ', text).strip()


def sanitize(html: Optional[str]) -> str:
    """
    Converte um campo HTML do GLPI em texto puro de uma linha.

    Remove blocos <style>/<script> (com o conteúdo), remove as demais tags,
    decodifica entidades (&nbsp; &quot; &lt; &gt; &amp; e numéricas) e
    colapsa espaços. O processo é repetido até o texto parar de mudar, o que
    também desfaz o HTML codificado em entidades (&lt;p&gt;...) que o GLPI
    grava na descrição dos chamados.

    Args:
        html: Conteúdo HTML (ou None)

    Returns:
        str: Texto limpo; string vazia para entradas nulas ou não textuais
    """
    if not html or not isinstance(html, str):
        return ""

    text = html
    while True:
        cleaned = _sanitize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def extract_contact_info(html: Optional[str]) -> Dict[str, str]:
    """
    Extrai nome, e-mail e telefone de um bloco HTML de usuário do GLPI.

    O GLPI renderiza as colunas de requerente e técnico como HTML com links
    mailto:/tel:. O nome é o texto antes da primeira tag; sem ele, usa o
    primeiro texto visível entre tags.

    Args:
        html: HTML da coluna (ou None)

    Returns:
        dict: {'nome', 'email', 'telefone'} com strings vazias quando ausentes
    """
    if not html or not isinstance(html, str):
        return {'nome': '', 'email': '', 'telefone': ''}

    nome = ''
    leading = LEADING_TEXT_RE.match(html)
    if leading:
        nome = leading.group(1).strip()
    if not nome:
        text_node = FIRST_TEXT_NODE_RE.search(html)
        if text_node:
            nome = sanitize(text_node.group(1))

    email_match = EMAIL_RE.search(html)
    phone_match = PHONE_RE.search(html)

    return {
        'nome': nome,
        'email': email_match.group(1) if email_match else '',
        'telefone': phone_match.group(1) if phone_match else '',
    }
