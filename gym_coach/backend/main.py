# backend/main.py
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .llm_agent import LLM_PROVIDER, generate_feedback
from .models import GenerateRequest, GenerateResponse

app = FastAPI(title="AI Gym Coach - feedback backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_check():
    return {"status": "ok", "llm": LLM_PROVIDER}


@app.post("/v1/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest):
    prompt = req.prompt()
    if not prompt:
        raise HTTPException(status_code=400, detail="empty prompt")

    cfg = req.generationConfig
    text = generate_feedback(prompt, temperature=cfg.temperature, max_output_tokens=cfg.maxOutputTokens)
    if text is None:
        raise HTTPException(status_code=502, detail="text generation failed")
    return GenerateResponse.from_text(text)
