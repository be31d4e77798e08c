import logging

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from broker_backend.core.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Escreves sempre em português de Portugal."


def build_summary_prompt(title: str, url: str) -> str:
    return (
        "Redige um resumo curto (2-3 frases, em português de Portugal) para esta notícia, "
        "de forma neutra e informativa, sem copiar texto literal. "
        f'Título: "{title}". URL: {url}.'
    )


class SummaryService:
    """
    Generates short PT-PT news summaries with the OpenAI chat completions API.
    """

    def __init__(self, settings: Settings):
        """
        Initializes the chat model when an OpenAI API key is configured.

        Args:
            settings: The application settings object.
        """
        self.settings = settings
        self.llm = None
        if not settings.OPENAI_API_KEY:
            logger.info("OPENAI_API_KEY not set; news summaries are disabled.")
            return
        try:
            self.llm = ChatOpenAI(
                model=settings.OPENAI_MODEL,
                api_key=settings.OPENAI_API_KEY.get_secret_value(),
                temperature=0.4,
            )
            logger.info("ChatOpenAI model %s initialized for SummaryService.", settings.OPENAI_MODEL)
        except Exception as e:
            logger.error(f"Failed to initialize ChatOpenAI model: {e}", exc_info=True)
            raise

    async def generate_summary(self, title: str, url: str) -> str:
        """
        Returns a 2-3 sentence summary for a news item.

        Args:
            title: The news headline.
            url: Link to the article; the provider may read it.

        Returns:
            The summary, or an empty string when summaries are disabled or the
            API call fails.
        """
        if self.llm is None:
            return ""
        try:
            logger.info("Invoking model to summarize '%s'.", title)
            response = await self.llm.ainvoke(
                [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=build_summary_prompt(title, url))]
            )
            content = response.content if isinstance(response.content, str) else ""
            return content.strip()
        except Exception:
            logger.exception("AI call failed, falling back to empty summary")
            return ""
