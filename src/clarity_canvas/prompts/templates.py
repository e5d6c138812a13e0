"""Prompt templates for the LLM-backed extraction, refinement and synthesis adapters.

Templates are ``str.format`` strings; literal braces are doubled.
"""

from __future__ import annotations

from clarity_canvas.schema import ProfileSchema


def render_field_catalog(schema: ProfileSchema) -> str:
    """List every section / subsection / field key for the extraction prompt."""
    lines: list[str] = []
    for section in schema.sections:
        lines.append(f"- {section.key}: {section.name}")
        for sub in section.subsections:
            lines.append(f"  - {sub.key}: {', '.join(sub.fields)}")
    return "\n".join(lines)


# ── Extraction ───────────────────────────────────────────────────────

EXTRACTION_SYSTEM_PROMPT = """You extract structured profile information from \
transcripts and notes. Always answer with valid JSON. Only extract what is stated \
or strongly implied; never invent details."""

EXTRACTION_PROMPT = """Map the following text onto the profile structure below.

PROFILE STRUCTURE (section: subsection: fields):
{field_catalog}
{scope_line}
RULES:
1. Keep the speaker's own wording where possible.
2. Use the most specific field that fits; one chunk per distinct fact.
3. Give each chunk a display summary of at most {summary_max_chars} characters.
4. Rate confidence from 0 to 1 by how clearly the fact was stated. \
Hedged or unsure statements get a low score.
5. Keep numbers, quantities and names exactly as given.

TEXT:
{raw_text}

Return a JSON object with this exact structure:
{{
    "chunks": [
        {{
            "targetSection": "<section key>",
            "targetSubsection": "<subsection key>",
            "targetField": "<field key>",
            "content": "<extracted text>",
            "summary": "<short display summary>",
            "confidence": <0.0-1.0>,
            "insights": ["<optional implication>"]
        }}
    ]
}}

Directly return the final JSON structure. Do not output anything else."""

# ── Refinement ───────────────────────────────────────────────────────

REFINEMENT_SYSTEM_PROMPT = """You revise a single piece of profile content according \
to the user's request. Keep facts that the user did not ask to remove and keep a \
professional third-person tone."""

REFINEMENT_PROMPT = """CURRENT CONTENT:
{content}

CURRENT SUMMARY:
{summary}

USER REQUEST:
"{instruction}"

Return a JSON object with this exact structure:
{{
    "refinedContent": "<revised content>",
    "refinedSummary": "<revised summary, at most {summary_max_chars} characters>",
    "changeSummary": "<one sentence describing the change>"
}}

Directly return the final JSON structure. Do not output anything else."""

# ── Synthesis ────────────────────────────────────────────────────────

SYNTHESIS_SYSTEM_PROMPT = """You merge several notes about one profile field into a \
single coherent entry. Write in the third person ("They prefer...") and keep \
specific facts from every note. Do not simply concatenate the notes."""

SYNTHESIS_PROMPT = """FIELD: {field_name}

NOTES (oldest first):
{sources}

PREFERRED CURRENT VALUE:
{preferred}
{conflict_block}
Return a JSON object with this exact structure:
{{
    "fullContext": "<2-3 sentences, at most {context_max_chars} characters>",
    "summary": "<at most {summary_max_chars} characters>"
}}

Directly return the final JSON structure. Do not output anything else."""

SYNTHESIS_CONFLICT_BLOCK = """
The newest note was stated with low confidence and disagrees with earlier notes. \
Lead with the preferred value but mention these earlier claims explicitly:
{superseded}
"""
