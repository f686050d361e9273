# backend/llm_agent.py

import logging
import os
from typing import Optional

import dotenv
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_groq import ChatGroq

dotenv.load_dotenv()

log = logging.getLogger(__name__)

GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "groq").lower()
LLM_MODEL = os.getenv("LLM_MODEL")

SYSTEM_PROMPT = (
    "You are a real-time gym coach speaking to the user between reps.\n"
    "- Talk directly to the user as \"you\".\n"
    "- Be confident, supportive and brief.\n"
    "- No emojis, no markdown, no lists.\n"
    "- Never mention that you are an AI or that you received data.\n"
    "- When the form sounds solid, use words like Excellent or Good; when "
    "something should change, say what to Improve or Adjust."
)


def build_llm(temperature: float, max_output_tokens: int):
    if LLM_PROVIDER == "gemini":
        return ChatGoogleGenerativeAI(
            api_key=GOOGLE_API_KEY,
            model=LLM_MODEL or "gemini-2.5-flash-lite",
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            max_retries=1,
        )
    return ChatGroq(
        api_key=GROQ_API_KEY,
        model=LLM_MODEL or "llama-3.3-70b-versatile",
        temperature=temperature,
        max_tokens=max_output_tokens,
        max_retries=1,
    )


def generate_feedback(prompt: str, temperature: float = 0.7, max_output_tokens: int = 150) -> Optional[str]:
    """
    Runs the coach prompt through the configured chat model.
    If the LLM fails for ANY reason -> return None (no canned fallback).
    """
    messages = [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(content=prompt),
    ]

    try:
        resp = build_llm(temperature, max_output_tokens).invoke(messages)
    except Exception as e:
        log.error("LLM call failed (%s): %s", LLM_PROVIDER, e)
        return None

    text = resp.content if hasattr(resp, "content") else str(resp)
    if isinstance(text, list):
        # some providers return content blocks
        text = "".join(b.get("text", "") if isinstance(b, dict) else str(b) for b in text)
    text = (text or "").strip()
    if not text:
        log.error("LLM returned empty content")
        return None
    return text
