from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Literal, Optional, Union

class InferenceRequest(BaseModel):
    """A prompt plus the output schema the scoring service must satisfy."""
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    prompt: str
    temperature: float
    function_name: Optional[str] = None
    function_description: str = ""
    parameters: Optional[Dict[str, Any]] = None

    @property
    def is_structured(self) -> bool:
        return self.function_name is not None and self.parameters is not None

    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.prompt},
        ]

    def tools(self) -> List[Dict[str, Any]]:
        return [{
            "type": "function",
            "function": {
                "name": self.function_name,
                "description": self.function_description,
                "parameters": self.parameters,
            }
        }]

    def tool_choice(self) -> Dict[str, Any]:
        return {"type": "function", "function": {"name": self.function_name}}

class ToolCallResult(BaseModel):
    kind: Literal["tool_call"] = "tool_call"
    arguments: str

class TextResult(BaseModel):
    kind: Literal["text"] = "text"
    content: str

StructuredPayload = Union[ToolCallResult, TextResult]
