# lambdas/error_monitor/analysis.py
import re
from pathlib import Path
from typing import Optional

from .bedrock_client import BedrockInference
from .models import ANALYSIS_FALLBACK, ErrorContext, get_settings

ANALYSIS_MAX_TOKENS = 2048
SUMMARY_MAX_TOKENS = 300

_THINK_BLOCK = re.compile(r"^.*?</think>", re.DOTALL)
_UNCLOSED_THINK = re.compile(r"<think>.*\Z", re.DOTALL)


def _load_prompt(filename: str) -> Optional[str]:
    try:
        return (Path(__file__).parent / filename).read_text()
    except FileNotFoundError:
        print(f"❌ Prompt file '{filename}' not found.")
        return None


ANALYSIS_PROMPT_TEMPLATE = _load_prompt("analysis_prompt.txt")
SUMMARY_PROMPT_TEMPLATE = _load_prompt("summary_prompt.txt")


def build_analysis_prompt(context: ErrorContext, template: Optional[str] = None) -> str:
    """Stage 1 prompt: the full error context, asking for causes and a fix."""
    template = template or ANALYSIS_PROMPT_TEMPLATE
    if template is None:
        raise ValueError("Analysis prompt template is not available.")
    return template.format(
        script_name=context.script_name or "N/A",
        url=context.url or "N/A",
        method=context.method or "N/A",
        timestamp=context.timestamp,
        exceptions=context.exceptions,
        logs=context.logs,
    ).strip()


def strip_reasoning(text: str, reasoning_opened: bool = False) -> str:
    """
    Drops a reasoning model's <think>...</think> preamble, keeping the answer.

    Output cut off before </think> is all reasoning and yields "". When the
    prompt itself opened the <think> block (`reasoning_opened`), the reply
    carries no opening tag, so a reply without </think> is reasoning as well.
    """
    if "</think>" in text:
        return _THINK_BLOCK.sub("", text, count=1).strip()
    if reasoning_opened:
        return ""
    return _UNCLOSED_THINK.sub("", text).strip()


def build_summary_prompt(analysis_text: str, template: Optional[str] = None) -> str:
    """Stage 2 prompt: condense the stage 1 analysis to a few sentences."""
    template = template or SUMMARY_PROMPT_TEMPLATE
    if template is None:
        raise ValueError("Summary prompt template is not available.")
    return template.format(analysis=strip_reasoning(analysis_text)).strip()


class AnalysisEngine:
    """
    Two-stage AI summary of an error: a reasoning model analyses the error in
    depth, then a faster model condenses that analysis into 2-3 sentences.

    Never raises. Any failure yields ANALYSIS_FALLBACK so the notification is
    still sent.
    """
    def __init__(self, inference, analysis_model_id: str = None, summary_model_id: str = None):
        settings = get_settings()
        self.inference = inference
        self.analysis_model_id = analysis_model_id or settings.analysis_model_id
        self.summary_model_id = summary_model_id or settings.summary_model_id

    def _ask(self, model_id: str, prompt: str, max_tokens: int) -> str:
        response = self.inference.run(model_id, {
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
        })
        text = (response or {}).get("response")
        if not text or not text.strip():
            raise ValueError(f"Empty response from model '{model_id}'")
        return text

    def analyze(self, context: ErrorContext) -> str:
        raw_text = self._ask(self.analysis_model_id, build_analysis_prompt(context), ANALYSIS_MAX_TOKENS)
        # DeepSeek prompts end with an opened <think> block
        reasoning_opened = BedrockInference.model_family(self.analysis_model_id) == "deepseek"
        analysis_text = strip_reasoning(raw_text, reasoning_opened=reasoning_opened)
        if not analysis_text:
            raise ValueError(f"Model '{self.analysis_model_id}' returned reasoning but no analysis")
        return analysis_text

    def condense(self, analysis_text: str) -> str:
        return self._ask(self.summary_model_id, build_summary_prompt(analysis_text), SUMMARY_MAX_TOKENS)

    def summarize(self, context: ErrorContext) -> str:
        try:
            analysis_text = self.analyze(context)
            return self.condense(analysis_text).strip()
        except Exception as e:
            print(f" -> ⚠️ Error generating AI summary: {e}. Falling back to default text.")
            return ANALYSIS_FALLBACK
