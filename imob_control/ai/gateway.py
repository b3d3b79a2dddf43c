"""Portfolio assistant operations backed by the generative model.

None of these operations raise on model or network failure: each has a
documented fallback (placeholder text, empty list, derived image URLs).
The only exception is ``extract_records(..., raise_errors=True)``, for
callers that want to show the specific failure.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Iterable
from urllib.parse import quote

from imob_control.ai.client import GeminiClient, inline_part, text_part
from imob_control.ai.responses import (
    AIResponse,
    ResponseStatus,
    parse_records,
    parse_string_list,
)
from imob_control.exceptions import AIGatewayError, ExtractionError
from imob_control.models import FinancialRecord, Property
from imob_control.report import format_brl

logger = logging.getLogger(__name__)

IMAGE_COUNT = 4
IMAGE_URL = "https://image.pollinations.ai/prompt/{prompt}?width=800&height=600&nologo=true&model=flux&seed={seed}"
FALLBACK_IMAGE_VARIANTS = (("", 101), ("%20interior", 202), ("%20modern", 303), ("%20view", 404))

DESCRIPTION_EMPTY = "Não foi possível gerar a descrição."
DESCRIPTION_FAILED = "Erro ao conectar com a IA. Verifique sua chave API."
CHAT_EMPTY = "Desculpe, não entendi."
CHAT_FAILED = "Desculpe, estou com dificuldades para processar sua solicitação no momento."

DESCRIPTION_PROMPT = """Atue como um redator especialista em marketing imobiliário de luxo.
Crie uma descrição atraente, profissional e persuasiva para um imóvel com as seguintes características:
- Tipo: {type}
- Localização: {location}
- Quartos: {bedrooms}
- Características e Diferenciais: {features}

A descrição deve ter cerca de 2 parágrafos, focando nos benefícios e estilo de vida.
Use formatação Markdown simples se necessário.
Retorne APENAS a descrição, sem introduções."""

EXTRACTION_PROMPT = """Analise este documento financeiro/extrato.
Identifique todos os lançamentos referentes a diárias, aluguéis, pagamentos recebidos e despesas do imóvel.

Para cada lançamento extraia:
1. "date": a data da transação (formato DD/MM/YYYY)
2. "checkIn" e "checkOut": datas de entrada e saída da hospedagem, se houver (formato DD/MM/YYYY)
3. "amount": o valor monetário (número positivo)
4. "description": uma breve descrição (ex: "Diária Airbnb", "Pagamento Aluguel")
5. "type": "revenue" para entradas ou "expense" para despesas

Retorne APENAS um JSON array puro, sem markdown.
Se não encontrar nada, retorne []."""

IMAGE_PROMPT = """Transform the following search query: "{query}" into {count} DISTINCT, SHORT, VISUAL keywords in English.
Keep each string under 6 words.
Focus on architecture, interior design, and realism.

Example Input: "Apartamento luxo jardins"
Example Output: [
  "luxury modern apartment living room interior",
  "modern building facade glass architecture",
  "cozy bedroom apartment city view",
  "luxury kitchen marble countertop interior"
]

Return ONLY the JSON array of strings."""

CHAT_INSTRUCTION = """Você é o "Corretor AI", um assistente virtual inteligente do sistema ImobControl AI.
Seu objetivo é ajudar corretores de imóveis a gerenciar seu portfólio e responder perguntas sobre os imóveis cadastrados.

DADOS DO PORTFÓLIO ATUAL (use isso para responder perguntas específicas):
{context}

DIRETRIZES:
1. Seja profissional, prestativo e direto.
2. Se o usuário perguntar sobre preços, calcule médias ou totais se solicitado.
3. Se perguntarem sobre um imóvel específico, use os detalhes fornecidos.
4. Se a pergunta não for sobre imóveis, ajude de forma geral sobre o mercado imobiliário.
5. Responda sempre em Português do Brasil."""


def portfolio_context(properties: Iterable[Property]) -> str:
    """One line per property for the assistant's system instruction."""
    lines = []
    for p in properties:
        lines.append(
            f"- ID: {p.id}, {p.type.value} em {p.address}, {p.bedrooms} quartos, "
            f"{format_brl(p.price)}, Status: {p.status.value}. Detalhes: {p.title}. "
            f"Lançamentos: {len(p.rental_history)}, saldo {format_brl(p.balance())}"
        )
    return "\n".join(lines) or "Nenhum imóvel cadastrado."


def image_url(prompt: str, seed: int) -> str:
    return IMAGE_URL.format(prompt=quote(prompt, safe="-_.!~*'()"), seed=seed)


def fallback_image_urls(query: str) -> list[str]:
    """Deterministic URLs derived from the raw query."""
    cleaned = re.sub(r"[^a-zA-Z0-9 ]", "", query)
    words = " ".join(cleaned.split(" ")[:3])
    encoded = quote(f"{words} real estate architecture", safe="-_.!~*'()")
    return [
        IMAGE_URL.format(prompt=encoded + suffix, seed=seed)
        for suffix, seed in FALLBACK_IMAGE_VARIANTS
    ]


class AIGateway:
    """Description writing, statement extraction, image search and chat."""

    def __init__(self, client: GeminiClient, rng: random.Random | None = None) -> None:
        self.client = client
        self._rng = rng or random.Random()

    def describe_property(
        self,
        features: str,
        property_type: str,
        location: str,
        bedrooms: int,
    ) -> str:
        """Marketing description for a property."""
        prompt = DESCRIPTION_PROMPT.format(
            type=property_type,
            location=location,
            bedrooms=bedrooms,
            features=features,
        )
        try:
            text = self.client.generate([text_part(prompt)])
        except AIGatewayError as e:
            logger.warning("Description generation failed: %s", e)
            return DESCRIPTION_FAILED
        return text.strip() or DESCRIPTION_EMPTY

    def extract_records_result(
        self,
        document: bytes,
        mime_type: str = "application/pdf",
    ) -> AIResponse[list[FinancialRecord]]:
        """Extract statement records as a tagged result."""
        try:
            text = self.client.generate(
                [inline_part(document, mime_type), text_part(EXTRACTION_PROMPT)],
                json_response=True,
            )
        except AIGatewayError as e:
            return AIResponse.failed(str(e))
        return parse_records(text)

    def extract_records(
        self,
        document: bytes,
        mime_type: str = "application/pdf",
        *,
        raise_errors: bool = False,
    ) -> list[FinancialRecord]:
        """Extract statement records from a document.

        Parameters
        ----------
        document : bytes
            Raw document bytes.
        mime_type : str
            Document MIME type.
        raise_errors : bool
            Raise :class:`ExtractionError` instead of returning an empty
            list when the call fails or the reply cannot be parsed.
        """
        result = self.extract_records_result(document, mime_type)
        if result.ok:
            logger.info(
                "Extracted %d records from document",
                len(result.value),
                extra={"record_count": len(result.value), "mime_type": mime_type},
            )
            return result.value

        logger.error("Record extraction %s: %s", result.status.value.lower(), result.error)
        if raise_errors:
            if result.status == ResponseStatus.FAILED:
                raise ExtractionError(f"Could not reach the model: {result.error}")
            raise ExtractionError(f"Could not read the model reply: {result.error}")
        return []

    def find_images(self, query: str) -> list[str]:
        """Exactly four candidate image URLs for a search query."""
        fallback = fallback_image_urls(query)
        try:
            text = self.client.generate(
                [text_part(IMAGE_PROMPT.format(query=query, count=IMAGE_COUNT))],
                json_response=True,
            )
        except AIGatewayError as e:
            logger.warning("Image keyword generation failed: %s", e)
            return fallback

        parsed = parse_string_list(text)
        if not parsed.ok:
            logger.warning("Image keywords unusable: %s", parsed.error)
            return fallback

        urls = [image_url(desc, self._rng.randint(0, 9999)) for desc in parsed.value[:IMAGE_COUNT]]
        return urls + fallback[len(urls):]

    def chat(
        self,
        message: str,
        properties: Iterable[Property],
        history: Iterable[tuple[str, str]] = (),
    ) -> str:
        """Answer a question with the portfolio as context."""
        instruction = CHAT_INSTRUCTION.format(context=portfolio_context(properties))
        try:
            text = self.client.generate(
                [text_part(message)],
                system_instruction=instruction,
                history=list(history),
            )
        except AIGatewayError as e:
            logger.warning("Chat request failed: %s", e)
            return CHAT_FAILED
        return text.strip() or CHAT_EMPTY
