"""
Extração de JSON a partir de texto livre do LLM.

A saída do modelo não é confiável: pode vir cercada de ```json, com texto
antes/depois, truncada, ou com vários objetos. Assumimos que o payload é o
primeiro span `{...}` de nível superior que seja JSON válido. Cercas e prosa
fora das chaves são ignoradas pelo scan; o conteúdo das strings não é tocado.
"""
import json
from typing import Any, Dict, Optional


class JsonExtractionError(ValueError):
    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


def _span_end(text: str, start: int) -> Optional[int]:
    """Índice do `}` que fecha o `{` em `start`, respeitando strings e escapes."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    # truncado: nunca fechou
    return None


def find_json_span(text: str) -> Optional[str]:
    """Primeiro `{...}` balanceado do texto (ou None)."""
    start = text.find("{")
    if start == -1:
        return None
    end = _span_end(text, start)
    return text[start : end + 1] if end is not None else None


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    if not text:
        raise JsonExtractionError("no_json", "empty text")

    last_error = None
    start = text.find("{")
    while start != -1:
        end = _span_end(text, start)
        if end is None:
            # tudo depois daqui está dentro de um objeto que nunca fecha
            break
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            last_error = e
        # próximo candidato de nível superior: depois do span que falhou
        start = text.find("{", end + 1)

    if last_error is not None:
        raise JsonExtractionError("malformed_json", str(last_error)) from last_error
    raise JsonExtractionError("no_json", "no balanced JSON object found")
