"""All prompt templates for the agentic pipeline."""

from __future__ import annotations

from agentic_rag.models.domain import RetrievedPassage


# --- Retrieval context -------------------------------------------------------

DOCUMENT_CONTEXT_HEADER = """RELEVANT CONTEXT FROM THE LOADED DOCUMENTS

CRITICAL INSTRUCTIONS:
1. The excerpts below come ONLY from the loaded documents.
2. You MUST answer EXCLUSIVELY from this document content.
3. NEVER mention database tools, transactions, accounts, balances or any
   financial record from the transaction database, nor any SQL operation.
4. If the information is not in the documents, say so clearly.
5. Do not invent information.
6. Quote the document content directly where relevant.

DOCUMENT CONTENT:
"""


def format_passage_block(passages: list[RetrievedPassage], max_chars: int = 5000) -> str:
    """Format ranked passages as a numbered excerpt block with the document preamble."""
    lines = [DOCUMENT_CONTEXT_HEADER]
    index = 1
    for passage in passages:
        text = passage.text.strip()
        if not text:
            continue
        if len(text) > max_chars:
            text = text[:max_chars] + "..."
        lines.append(f"[Excerpt {index}] (score: {passage.score:.3f})\n{text}\n")
        index += 1
    return "\n".join(lines)


# --- Structuring --------------------------------------------------------------

INTENT_SYSTEM = "You are an intent analysis expert. Reply ONLY with the intent as one short sentence."

INTENT_PROMPT = """Analyze the following question and identify its main intent.
Reply ONLY with the intent in one short sentence.

QUESTION:
{question}

INTENT:"""

KEY_POINTS_SYSTEM = "You are an information extraction expert. Reply ONLY with a bulleted list of key points."

KEY_POINTS_PROMPT = """From the following question and context, extract the 3-5 most important key points.
Reply ONLY with a bulleted list.

QUESTION:
{question}

CONTEXT:
{context}

KEY POINTS:"""

TEMPLATE_SYSTEM = "You are a response structuring expert. Suggest ONLY the structure (template), not the content."

TEMPLATE_PROMPT = """Based on the following intent, suggest a response template (structure only, no content).

INTENT:
{intent}

KEY POINTS:
{key_points}

RESPONSE TEMPLATE:"""

DOCUMENT_SECTION_TITLE = "DOCUMENT INFORMATION:"
DATABASE_SECTION_TITLE = "TRANSACTION DATABASE DATA:"
INSTRUCTIONS_SECTION_TITLE = "INSTRUCTIONS:"

DOCUMENT_ONLY_INSTRUCTIONS = [
    "Use ONLY the document information above",
    "Do not mention the database",
]
TOOL_ONLY_INSTRUCTIONS = [
    "Use ONLY the database data above",
    "Do not mention documents",
]
MIXED_INSTRUCTIONS = ["Use the relevant information from the context above"]
COMMON_INSTRUCTIONS = [
    "Answer clearly and in a structured way",
    "Cite sources when relevant",
]

KEY_POINTS_SECTION_TITLE = "KEY POINTS:"
TEMPLATE_SECTION_TITLE = "SUGGESTED RESPONSE STRUCTURE:"


def format_generation_context(body: str, key_points: str, response_template: str) -> str:
    """Structured body followed by the key points and response shape, when present."""
    parts = [body]
    if key_points:
        parts.append(f"{KEY_POINTS_SECTION_TITLE}\n{key_points}")
    if response_template:
        parts.append(f"{TEMPLATE_SECTION_TITLE}\n{response_template}")
    return "\n\n".join(parts)


# --- Think-Act-Observe -------------------------------------------------------

THINK_SYSTEM = "You are a reasoning agent. Analyze the question and context, then decide the next action."

THINK_PROMPT = """Analyze the question and the available context, then decide the next action.

QUESTION:
{question}

AVAILABLE CONTEXT:
{context}

PREVIOUS STEPS:
{history}

Reply in exactly this format:
REASONING: [your reasoning in 2-3 sentences]
ACTION: [ANSWER, SEARCH_MORE, or CLARIFY]
STEP: [short description of this reasoning step]"""

OBSERVE_SYSTEM = "You are an observation agent. Assess the outcome of the last action."

OBSERVE_PROMPT = """Assess the available context after the following action.

ACTION TAKEN:
{action}

AVAILABLE CONTEXT:
{context}

Reply in exactly this format:
RESULT: [description of the outcome]
SUCCESS: [YES or NO]
NEXT_STEP: [ANSWER, CONTINUE, or SEARCH_MORE]"""

ANSWER_SYSTEM = (
    "You are an expert assistant. Answer clearly and precisely. "
    "Always answer in {language}."
)

ANSWER_PROMPT = """Answer the following question using the provided context.

QUESTION:
{question}

CONTEXT:
{context}
{conversation}{history}

ANSWER:"""

NO_CONTEXT = "No context available"
NO_PREVIOUS_STEPS = "No previous step"


# --- Verification ------------------------------------------------------------

COHERENCE_SYSTEM = "You are a coherence analysis expert. Reply ONLY with a number between 0.0 and 1.0."

COHERENCE_PROMPT = """Assess how coherent the following answer is with the provided context.
Reply ONLY with a score between 0.0 and 1.0 (0.0 = not coherent, 1.0 = fully coherent).

CONTEXT:
{context}

ANSWER:
{answer}

Coherence score (0.0-1.0):"""

HALLUCINATION_SYSTEM = "You are a hallucination detection expert. Reply ONLY with a number between 0.0 and 1.0."

HALLUCINATION_PROMPT = """Check whether the following answer contains information that is NOT in the context.
Reply ONLY with a score between 0.0 and 1.0 (0.0 = many hallucinations, 1.0 = no hallucination).

CONTEXT:
{context}

ANSWER:
{answer}

Score (0.0-1.0):"""

RELEVANCE_SYSTEM = "You are a relevance analysis expert. Reply ONLY with a number between 0.0 and 1.0."

RELEVANCE_PROMPT = """Assess whether the following answer addresses the question asked.
Reply ONLY with a score between 0.0 and 1.0 (0.0 = not relevant, 1.0 = highly relevant).

QUESTION:
{question}

ANSWER:
{answer}

Relevance score (0.0-1.0):"""

CORRECTION_SYSTEM = (
    "You are a response correction expert. Produce an improved answer grounded "
    "in the context. Always answer in {language}."
)

CORRECTION_PROMPT = """The following answer was generated but has problems: {issues}

ORIGINAL QUESTION:
{question}

AVAILABLE CONTEXT:
{context}

ORIGINAL ANSWER (to correct):
{answer}

DETECTED PROBLEMS:
{issues}

Write a CORRECTED answer that:
1. Better answers the question
2. Uses only information from the context
3. Avoids hallucinations
4. Is coherent with the context

CORRECTED ANSWER:"""


def format_thought_history(history: list[str]) -> str:
    return "\n".join(history) if history else NO_PREVIOUS_STEPS
