import json
import logging
import re
from typing import Any, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from broker_backend.core.config import Settings

logger = logging.getLogger(__name__)

ALLOWED_TAGS = [
    "auto",
    "vida",
    "saude",
    "habitacao",
    "empresas",
    "rc-profissional",
    "condominio",
    "multirriscos-empresarial",
    "frota",
    "acidentes-trabalho",
    "fiscalidade",
    "sinistros",
    "economia",
    "ambiente",
    "infraestruturas",
    "local",
    "nacional",
]

MAX_TAGS = 4

SYSTEM_PROMPT = (
    'Escreves sempre em português de Portugal e respondes apenas com JSON válido '
    'com uma propriedade "tags".'
)

_FENCED_BLOCK = re.compile(r"```[a-zA-Z]*[\s\S]*?```")


def build_tag_prompt(title: str, summary: str, region: str = "") -> str:
    prompt = (
        "Tens de responder apenas em JSON.\n"
        "Campos obrigatórios:\n"
        "- tags: array com 2-4 etiquetas em minúsculas, escolhidas apenas de entre esta lista: "
        f"{', '.join(ALLOWED_TAGS)}.\n"
        "Não inventes etiquetas fora desta lista.\n\n"
        "Notícia para classificar:\n"
        f'Título: "{title}"\n'
        f'Resumo: "{summary}"\n'
    )
    if region:
        prompt += f'Região: "{region}"\n'
    return prompt


def _allowed(values: List[Any]) -> List[str]:
    tags = [str(v).lower().strip() for v in values]
    # first occurrence wins, at most MAX_TAGS
    return list(dict.fromkeys(t for t in tags if t in ALLOWED_TAGS))[:MAX_TAGS]


def parse_tags(content: str) -> List[str]:
    """Extract vocabulary tags from a model reply.

    Accepts ``{"tags": [...]}`` or a bare JSON array, optionally wrapped in a
    Markdown code fence. Anything outside ALLOWED_TAGS is dropped, as are
    repeats, and at most MAX_TAGS are kept.
    """
    fenced = _FENCED_BLOCK.search(content)
    if fenced:
        content = re.sub(r"^```[a-zA-Z]*\s*", "", fenced.group(0), flags=re.IGNORECASE)
        content = re.sub(r"```\s*$", "", content).strip()

    try:
        parsed = json.loads(content)
        if isinstance(parsed, dict) and isinstance(parsed.get("tags"), list):
            return _allowed(parsed["tags"])
        if isinstance(parsed, list):
            return _allowed(parsed)
        return []
    except json.JSONDecodeError:
        pass

    cleaned = re.sub(r"```[a-zA-Z]*", "", content)
    cleaned = re.sub(r"^json\s*:", "", cleaned.strip(), flags=re.IGNORECASE).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        return []
    return _allowed(parsed) if isinstance(parsed, list) else []


class TaggingService:
    """Classify news documents into the controlled tag vocabulary."""

    def __init__(self, settings: Settings):
        self.settings = settings
        try:
            self.llm = ChatOpenAI(
                model=settings.OPENAI_MODEL,
                api_key=settings.OPENAI_API_KEY.get_secret_value() if settings.OPENAI_API_KEY else None,
                temperature=0.2,
            )
            logger.info("ChatOpenAI model %s initialized for TaggingService.", settings.OPENAI_MODEL)
        except Exception as e:
            logger.error("Failed to initialize ChatOpenAI for TaggingService: %s", e)
            raise

    async def generate_tags(self, doc_id: str, data: Dict[str, Any]) -> Optional[List[str]]:
        """Return 2-4 vocabulary tags for a news document, or None when there is nothing to write.

        API failures propagate so the caller can log them per document.
        """
        title = data.get("title") or ""
        summary = data.get("summary") or ""
        region = data.get("region") or ""
        if not title and not summary:
            logger.warning("Skipping doc %s because it has no title/summary", doc_id)
            return None

        response = await self.llm.ainvoke(
            [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=build_tag_prompt(title, summary, region))]
        )
        content = response.content if isinstance(response.content, str) else ""
        tags = parse_tags(content)
        if not tags:
            logger.warning("No valid tags generated for doc %s", doc_id)
            return None
        return tags
