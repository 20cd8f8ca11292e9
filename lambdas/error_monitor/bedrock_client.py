# lambdas/error_monitor/bedrock_client.py
import json
from typing import Any, Dict, List, Optional

import boto3

from .models import get_settings

DEFAULT_MAX_TOKENS = 512


class BedrockInference:
    """
    Prompt-in / text-out access to AWS Bedrock models.

    `run` takes a model id and `{"messages": [{"role", "content"}, ...]}` and
    returns `{"response": text}`. The request body is built for the model
    family named by the id, so model ids can be swapped through environment
    variables. Bedrock and parsing errors are raised to the caller.
    """
    def __init__(self, bedrock_runtime=None):
        if bedrock_runtime is None:
            bedrock_runtime = boto3.client(
                service_name="bedrock-runtime",
                region_name=get_settings().aws_region,
            )
        self.bedrock_runtime = bedrock_runtime

    def run(self, model_id: str, inputs: Dict[str, Any]) -> Dict[str, str]:
        messages = inputs.get("messages") or []
        max_tokens = inputs.get("max_tokens", DEFAULT_MAX_TOKENS)
        request_body = self.build_request_body(model_id, messages, max_tokens)

        response = self.bedrock_runtime.invoke_model(
            modelId=model_id,
            body=json.dumps(request_body),
            accept="application/json",
            contentType="application/json",
        )
        response_body = json.loads(response["body"].read())

        text = self.extract_text_from_response(response_body)
        if text is None:
            raise ValueError(f"Could not find response text in Bedrock response: {response_body}")
        return {"response": text}

    @staticmethod
    def model_family(model_id: str) -> str:
        for family in ("amazon.nova", "anthropic", "meta", "deepseek"):
            if family in model_id:
                return family
        return "amazon.nova"

    def build_request_body(self, model_id: str, messages: List[Dict[str, str]], max_tokens: int) -> Dict[str, Any]:
        """Returns the exact JSON payload required by the model family."""
        family = self.model_family(model_id)

        if family == "anthropic":
            return {
                "anthropic_version": "bedrock-2023-05-31",
                "messages": [
                    {"role": m["role"], "content": [{"type": "text", "text": m["content"]}]}
                    for m in messages
                ],
                "max_tokens": max_tokens,
                "temperature": 0.5,
                "top_p": 0.9,
            }
        if family == "meta":
            return {
                "prompt": self._llama_prompt(messages),
                "max_gen_len": max_tokens,
                "temperature": 0.5,
                "top_p": 0.9,
            }
        if family == "deepseek":
            return {
                "prompt": self._deepseek_prompt(messages),
                "max_tokens": max_tokens,
                "temperature": 0.5,
                "top_p": 0.9,
            }
        # Amazon Nova
        return {
            "messages": [{"role": m["role"], "content": [{"text": m["content"]}]} for m in messages],
            "inferenceConfig": {
                "maxTokens": max_tokens,
                "temperature": 0.5,
                "topP": 0.9,
            },
        }

    @staticmethod
    def _llama_prompt(messages: List[Dict[str, str]]) -> str:
        parts = ["<|begin_of_text|>"]
        for m in messages:
            parts.append(f"<|start_header_id|>{m['role']}<|end_header_id|>\n\n{m['content']}<|eot_id|>")
        parts.append("<|start_header_id|>assistant<|end_header_id|>\n\n")
        return "".join(parts)

    @staticmethod
    def _deepseek_prompt(messages: List[Dict[str, str]]) -> str:
        parts = ["<｜begin▁of▁sentence｜>"]
        for m in messages:
            if m["role"] == "assistant":
                parts.append(f"<｜Assistant｜>{m['content']}<｜end▁of▁sentence｜>")
            else:
                parts.append(f"<｜User｜>{m['content']}")
        parts.append("<｜Assistant｜><think>\n")
        return "".join(parts)

    @staticmethod
    def extract_text_from_response(body: Dict[str, Any]) -> Optional[str]:
        """
        Safely extracts the assistant's reply text from the various
        Bedrock response structures.
        """
        # Amazon Nova
        if "output" in body:
            blocks = (
                body.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            for block in blocks:
                if isinstance(block, dict) and block.get("text"):
                    return block["text"]

        # Claude-family (Anthropic)
        if isinstance(body.get("content"), list) and body["content"]:
            first = body["content"][0]
            if isinstance(first, dict) and first.get("text"):
                return first["text"]

        # Meta Llama
        if isinstance(body.get("generation"), str):
            return body["generation"]

        # DeepSeek
        choices = body.get("choices")
        if isinstance(choices, list) and choices:
            first_choice = choices[0]
            if isinstance(first_choice, dict):
                if first_choice.get("text"):
                    return first_choice["text"]
                message = first_choice.get("message")
                if isinstance(message, dict) and message.get("content"):
                    return message["content"]
        return None
