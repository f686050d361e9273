# backend/models.py
#
# Mirrors the generateContent envelope so the client can talk to either
# Gemini or this proxy without changes.

from typing import List

from pydantic import BaseModel, Field


class Part(BaseModel):
    text: str


class Content(BaseModel):
    role: str = "user"
    parts: List[Part] = Field(min_length=1)


class GenerationConfig(BaseModel):
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    maxOutputTokens: int = Field(150, gt=0)


class GenerateRequest(BaseModel):
    contents: List[Content] = Field(min_length=1)
    generationConfig: GenerationConfig = Field(default_factory=GenerationConfig)

    def prompt(self) -> str:
        return "\n".join(p.text for c in self.contents for p in c.parts).strip()


class Candidate(BaseModel):
    content: Content
    finishReason: str = "STOP"


class GenerateResponse(BaseModel):
    candidates: List[Candidate]

    @classmethod
    def from_text(cls, text: str) -> "GenerateResponse":
        return cls(candidates=[Candidate(content=Content(role="model", parts=[Part(text=text)]))])
