"""
LLM Providers
=============
Builds the LangChain chat model and configures DSPy from AzureOpenAISettings.

Both point at the same Azure OpenAI deployment:
  - LangChain AzureChatOpenAI drives the agent graphs and the memory extractor.
  - DSPy drives typed structured extraction (Structured Output demo).

Keeping provider construction in one place means demos never touch client
parameters directly.
"""
import logging

import dspy
from langchain_openai import AzureChatOpenAI

from .config import AzureOpenAISettings

logger = logging.getLogger(__name__)


def build_llm(settings: AzureOpenAISettings, **overrides) -> AzureChatOpenAI:
    """
    Return an AzureChatOpenAI client for the configured deployment.

    `overrides` are passed straight to the client (e.g. temperature for
    models that accept it, or azure_deployment to target another deployment).
    """
    logger.info("[LLM] Azure OpenAI deployment: %s", settings.model_name)
    params = {
        "azure_endpoint":   settings.endpoint,
        "azure_deployment": settings.model_name,
        "api_version":      settings.api_version,
        "api_key":          settings.api_key,
    }
    params.update(overrides)
    return AzureChatOpenAI(**params)


def configure_dspy(settings: AzureOpenAISettings) -> dspy.LM:
    """Point DSPy at the same deployment as build_llm()."""
    lm = dspy.LM(
        "azure/" + settings.model_name,
        api_base=settings.endpoint,
        api_key=settings.api_key,
        api_version=settings.api_version,
    )
    dspy.configure(lm=lm)
    return lm
