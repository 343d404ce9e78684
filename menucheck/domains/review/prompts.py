"""
Review Prompts - Instructions and response schemas sent to the model.

Schemas use the OpenAPI subset accepted by Gemini's ``responseSchema``.
"""

from __future__ import annotations

from typing import Any

CORRECTION_PROMPT = """Você é um revisor profissional de cardápios de restaurantes.

Analise o texto do cardápio abaixo e identifique:
- erros de digitação, ortografia e gramática (type "correção");
- descrições que podem ficar mais profissionais ou apetitosas (type "sugestão").

Para cada ponto encontrado, informe:
- original: o trecho exato do cardápio, copiado sem alterações
- issue: uma descrição clara e concisa do problema
- suggestion: a versão corrigida ou melhorada do trecho
- type: "correção" ou "sugestão"

Responda apenas com um array JSON. Se não houver nada a corrigir, responda [].

CARDÁPIO:
\"\"\"{menu_text}\"\"\""""

COMPARISON_PROMPT = """Você é um auditor de cardápios de restaurantes.

Compare o CARDÁPIO com a TABELA DE REFERÊNCIA de preços abaixo. Considere que
o mesmo item pode aparecer com nomes ligeiramente diferentes nos dois textos.

Liste cada divergência encontrada com:
- item: o nome do item
- issue: "price_mismatch" (preços diferentes), "missing_in_menu" (está na
  referência mas não no cardápio) ou "missing_in_reference" (está no
  cardápio mas não na referência)
- details: objeto com menuPrice, referencePrice, menuName e referenceName,
  preenchendo apenas o que se aplica

Responda apenas com um array JSON. Se não houver divergências, responda [].

CARDÁPIO:
\"\"\"{menu_text}\"\"\"

TABELA DE REFERÊNCIA:
\"\"\"{reference_text}\"\"\""""


CORRECTION_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "original": {
                "type": "STRING",
                "description": "O trecho de texto original do cardápio que contém um erro ou pode ser melhorado.",
            },
            "issue": {
                "type": "STRING",
                "description": "Uma descrição clara e concisa do problema encontrado.",
            },
            "suggestion": {
                "type": "STRING",
                "description": "A versão corrigida e melhorada do texto.",
            },
            "type": {
                "type": "STRING",
                "enum": ["correção", "sugestão"],
            },
        },
        "required": ["original", "issue", "suggestion", "type"],
    },
}

COMPARISON_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "item": {"type": "STRING"},
            "issue": {
                "type": "STRING",
                "enum": ["price_mismatch", "missing_in_menu", "missing_in_reference"],
            },
            "details": {
                "type": "OBJECT",
                "properties": {
                    "menuPrice": {"type": "STRING"},
                    "referencePrice": {"type": "STRING"},
                    "menuName": {"type": "STRING"},
                    "referenceName": {"type": "STRING"},
                },
            },
        },
        "required": ["item", "issue"],
    },
}


def build_correction_prompt(menu_text: str) -> str:
    return CORRECTION_PROMPT.format(menu_text=menu_text)


def build_comparison_prompt(menu_text: str, reference_text: str) -> str:
    return COMPARISON_PROMPT.format(menu_text=menu_text, reference_text=reference_text)
