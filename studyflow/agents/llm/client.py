from studyflow.errors import ConfigurationError
from studyflow.settings import settings
from studyflow.agents.llm.base import LLMClient
from studyflow.agents.llm.gemini import GeminiClient
from studyflow.agents.llm.ollama import OllamaOpenAIClient
from studyflow.agents.llm.groq import GroqOpenAIClient

def get_llm_client() -> LLMClient:
    provider = settings.LLM_PROVIDER.lower()

    if provider == "groq":
        if not settings.GROQ_API_KEY:
            raise ConfigurationError("GROQ_API_KEY is not set.")
        return GroqOpenAIClient(
            api_key=settings.GROQ_API_KEY,
            base_url=settings.GROQ_BASE_URL,
            model=settings.GROQ_MODEL,
        )

    if provider == "ollama":
        return OllamaOpenAIClient(
            base_url = settings.ollama_base_url,
            model = settings.ollama_model,
        )

    if provider != "gemini":
        raise ConfigurationError(f"Unknown LLM_PROVIDER: {settings.LLM_PROVIDER}")
    if not settings.GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY (or API_KEY) is not set.")
    return GeminiClient(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)
